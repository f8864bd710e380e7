"""Reward catalog model."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Reward(models.Model):
    """
    Redeemable catalog item.

    Catalog administration owns everything except stock, which only the
    redemption workflow changes (decrement on approval, restock on reject).
    """

    name = models.CharField(_("name"), max_length=200)
    point_cost = models.PositiveIntegerField(_("point cost"))
    stock = models.IntegerField(_("stock"), default=0)
    total_available_quantity = models.PositiveIntegerField(
        _("total available quantity"),
        default=0,
        help_text=_("Historical cap of units ever made available"),
    )
    is_active = models.BooleanField(_("active"), default=True)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        verbose_name = _("reward")
        verbose_name_plural = _("rewards")
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="masonman_reward_stock_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.point_cost}pts, {self.stock} in stock)"
