from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from billing.conf import BillingConfig
from billing.services import BillGenerator


class Command(BaseCommand):
    help = "Create missing rent bills for every tenancy up to today (or --as-of)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--as-of",
            default=None,
            help="Generate through the month of this date (YYYY-MM-DD). Defaults to today.",
        )
        parser.add_argument(
            "--tenant-id",
            type=int,
            default=None,
            help="Restrict generation to a single tenant (by user id).",
        )

    def handle(self, *args, **options):
        as_of = None
        if options["as_of"]:
            try:
                as_of = parse_date(options["as_of"])
            except ValueError:
                as_of = None
            if as_of is None:
                raise CommandError("--as-of must be a valid date in YYYY-MM-DD format")

        result = BillGenerator(BillingConfig.from_settings()).generate_bills_up_to(
            as_of, tenant_id=options["tenant_id"]
        )
        summary = (
            f"Processed {result.tenancies} tenancy(ies): created {result.created} bill(s), "
            f"skipped {result.skipped}, failed {result.failed}."
        )
        if result.failed:
            self.stdout.write(self.style.WARNING(summary))
        else:
            self.stdout.write(self.style.SUCCESS(summary))
