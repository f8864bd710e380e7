"""LedgerEntry model - append-only point movements."""

from django.db import models
from django.utils.translation import gettext_lazy as _

from masonman.exceptions import MasonmanError


class SourceType(models.TextChoices):
    """What caused a ledger entry."""

    BAG_LIFT = "bag_lift", _("Bag lift")
    ADJUSTMENT = "adjustment", _("Adjustment")
    REFERRAL_BONUS = "referral_bonus", _("Referral bonus")


class LedgerEntryQuerySet(models.QuerySet):
    """Bulk writes bypass Model.save/delete, so they are refused here too."""

    def update(self, **kwargs):
        raise MasonmanError("LEDGER_IMMUTABLE")

    def bulk_update(self, objs, fields, batch_size=None):
        raise MasonmanError("LEDGER_IMMUTABLE")

    def delete(self):
        raise MasonmanError("LEDGER_IMMUTABLE")


class LedgerEntry(models.Model):
    """
    Immutable record of a points movement.

    Every credit, debit, refund, reversal and bonus is logged here.
    Entries are append-only: corrections are new compensating entries.

    At most one entry per (source_type, source_id) when source_id is set,
    so a bag lift can be credited once, reversed once and pay one referral
    bonus, and a redemption can be refunded once.
    """

    mason = models.ForeignKey(
        "masonman.Mason",
        on_delete=models.PROTECT,
        related_name="ledger_entries",
        verbose_name=_("mason"),
    )

    source_type = models.CharField(
        _("source type"),
        max_length=32,
        choices=SourceType.choices,
    )
    source_id = models.CharField(
        _("source id"),
        max_length=64,
        null=True,
        blank=True,
        help_text=_("BagLift or RewardRedemption id"),
    )
    points = models.IntegerField(
        _("points"),
        help_text=_("Positive for credits, negative for debits and reversals"),
    )
    balance_after = models.IntegerField(
        _("balance after"),
        help_text=_("Mason balance right after this entry"),
    )
    memo = models.CharField(_("memo"), max_length=255, blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)
    created_by = models.CharField(_("created by"), max_length=100, blank=True)

    objects = LedgerEntryQuerySet.as_manager()

    class Meta:
        verbose_name = _("ledger entry")
        verbose_name_plural = _("ledger entries")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["mason", "-created_at"], name="masonman_ledger_mason_recent"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["source_type", "source_id"],
                condition=models.Q(source_id__isnull=False),
                name="masonman_ledger_one_entry_per_source",
            ),
        ]

    def __str__(self):
        sign = "+" if self.points > 0 else ""
        return f"{sign}{self.points}pts [{self.source_type}] {self.memo}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise MasonmanError("LEDGER_IMMUTABLE", entry_id=self.pk)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise MasonmanError("LEDGER_IMMUTABLE", entry_id=self.pk)
