"""Mason model (loyalty account holder).

Data architecture:
    Mason.points_balance / Mason.bags_lifted
        Materialized projection of the ledger. Changed only by
        masonman.services.ledger.append() and the workflows, always inside
        the same transaction that writes the matching LedgerEntry.

    LedgerEntry
        Source of truth for every point movement. points_balance must equal
        the sum of the mason's entries after every commit.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Mason(models.Model):
    """
    Participant in the mason/petty-contractor loyalty program.

    Enrollment happens outside this app; masonman only mutates the
    balance and bag counters through its workflows.
    """

    code = models.CharField(
        _("code"),
        max_length=50,
        unique=True,
        help_text=_("Unique mason reference (ex: MSN-001)"),
    )
    name = models.CharField(_("name"), max_length=200)

    # Projection of the ledger
    points_balance = models.IntegerField(
        _("points balance"),
        default=0,
        help_text=_("Sum of all ledger entries for this mason"),
    )
    bags_lifted = models.IntegerField(
        _("bags lifted"),
        default=0,
        help_text=_("Lifetime purchase volume from approved bag lifts"),
    )

    # Lookup only, never an ownership edge
    referred_by = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        related_name="referrals",
        null=True,
        blank=True,
        verbose_name=_("referred by"),
    )

    is_active = models.BooleanField(_("active"), default=True, db_index=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("mason")
        verbose_name_plural = _("masons")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points_balance__gte=0),
                name="masonman_mason_balance_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(bags_lifted__gte=0),
                name="masonman_mason_bags_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.code}): {self.points_balance}pts"
