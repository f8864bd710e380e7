"""Management command to check every balance against the ledger."""

from django.core.management.base import BaseCommand, CommandError

from masonman.services.ledger import find_drift


class Command(BaseCommand):
    help = "Verify that each mason's points balance equals the sum of their ledger entries"

    def handle(self, *args, **options):
        drift = find_drift()
        if not drift:
            self.stdout.write(self.style.SUCCESS("All balances match the ledger."))
            return

        for item in drift:
            self.stderr.write(
                f"{item.mason_code}: stored {item.stored_balance}, "
                f"ledger {item.ledger_total} ({item.difference:+d})"
            )
        raise CommandError(f"{len(drift)} mason balance(s) drifted from the ledger.")
