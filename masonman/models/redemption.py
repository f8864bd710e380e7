"""RewardRedemption model - points-for-reward order."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class RedemptionStatus(models.TextChoices):
    PLACED = "placed", _("Placed")
    APPROVED = "approved", _("Approved")
    REJECTED = "rejected", _("Rejected")
    SHIPPED = "shipped", _("Shipped")
    DELIVERED = "delivered", _("Delivered")


class RewardRedemption(models.Model):
    """
    Order exchanging a mason's points for a reward.

    Points are debited when the order is placed (outside this app).
    Stock is only reserved on approval. points_debited never changes.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    mason = models.ForeignKey(
        "masonman.Mason",
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("mason"),
    )
    reward = models.ForeignKey(
        "masonman.Reward",
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("reward"),
    )

    quantity = models.PositiveIntegerField(_("quantity"))
    points_debited = models.PositiveIntegerField(_("points debited"))
    status = models.CharField(
        _("status"),
        max_length=20,
        choices=RedemptionStatus.choices,
        default=RedemptionStatus.PLACED,
        db_index=True,
    )

    # Delivery contact
    delivery_name = models.CharField(_("delivery name"), max_length=200, blank=True)
    delivery_phone = models.CharField(_("delivery phone"), max_length=20, blank=True)
    delivery_address = models.TextField(_("delivery address"), blank=True)

    fulfillment_notes = models.TextField(_("fulfillment notes"), blank=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("reward redemption")
        verbose_name_plural = _("reward redemptions")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="masonman_redemption_quantity_positive",
            ),
        ]

    def __str__(self):
        return f"{self.quantity}x {self.reward_id} ({self.status})"
