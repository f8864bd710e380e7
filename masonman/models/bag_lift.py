"""BagLift model - purchase credit request."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class BagLiftStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    APPROVED = "approved", _("Approved")
    REJECTED = "rejected", _("Rejected")


class BagLift(models.Model):
    """
    A purchase of cement bags awaiting (or past) point credit.

    Created pending by purchase intake. points_credited is fixed at
    creation; approval only adds slab and referral bonuses on top.
    Status changes go through masonman.services.bag_lift.transition().
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    mason = models.ForeignKey(
        "masonman.Mason",
        on_delete=models.PROTECT,
        related_name="bag_lifts",
        verbose_name=_("mason"),
    )

    purchase_date = models.DateField(_("purchase date"))
    bag_count = models.PositiveIntegerField(_("bag count"))
    points_credited = models.IntegerField(
        _("points credited"),
        help_text=_("Base and bonanza points, fixed when the lift is recorded"),
    )

    status = models.CharField(
        _("status"),
        max_length=20,
        choices=BagLiftStatus.choices,
        default=BagLiftStatus.PENDING,
        db_index=True,
    )
    approved_by = models.CharField(_("approved by"), max_length=100, blank=True)
    approved_at = models.DateTimeField(_("approved at"), null=True, blank=True)
    memo = models.CharField(_("memo"), max_length=255, blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("bag lift")
        verbose_name_plural = _("bag lifts")
        ordering = ["-purchase_date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(bag_count__gt=0),
                name="masonman_baglift_bag_count_positive",
            ),
        ]

    def __str__(self):
        return f"{self.bag_count} bags ({self.status}) - {self.mason_id}"
