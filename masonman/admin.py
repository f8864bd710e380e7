"""Masonman admin.

Ledger entries are read-only. Status changes on bag lifts and redemptions
go through admin actions that call the workflows, never direct edits.
"""

from django.contrib import admin, messages
from django.utils.html import format_html

from masonman.exceptions import MasonmanError
from masonman.models import (
    BagLift,
    LedgerEntry,
    Mason,
    Reward,
    RewardRedemption,
)
from masonman.services import bag_lift as bag_lift_service
from masonman.services import redemption as redemption_service


STATUS_COLORS = {
    "pending": "#ffc107",
    "placed": "#ffc107",
    "approved": "#17a2b8",
    "shipped": "#6f42c1",
    "delivered": "#28a745",
    "rejected": "#dc3545",
}


def _status_badge(obj):
    return format_html(
        '<span style="background:{}; color:#fff; padding:2px 8px; '
        'border-radius:3px; font-size:11px;">{}</span>',
        STATUS_COLORS.get(obj.status, "#6c757d"),
        obj.get_status_display(),
    )


def _run_transitions(modeladmin, request, queryset, transition, target):
    done = 0
    for obj in queryset:
        try:
            transition(obj.pk, target, actor=str(request.user.pk))
            done += 1
        except MasonmanError as exc:
            modeladmin.message_user(request, f"{obj.pk}: {exc.message}", level=messages.ERROR)
    if done:
        modeladmin.message_user(request, f"{done} record(s) moved to {target}.", level=messages.SUCCESS)


# ===========================================
# Mason Admin
# ===========================================


class LedgerEntryInline(admin.TabularInline):
    model = LedgerEntry
    extra = 0
    fields = ["created_at", "source_type", "source_id", "points", "balance_after", "memo"]
    readonly_fields = fields
    ordering = ["-created_at"]
    max_num = 20
    verbose_name_plural = "Ledger (latest 20)"

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Mason)
class MasonAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "points_balance", "bags_lifted", "referred_by", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["code", "name"]
    raw_id_fields = ["referred_by"]
    readonly_fields = ["points_balance", "bags_lifted", "created_at", "updated_at"]
    inlines = [LedgerEntryInline]


# ===========================================
# Ledger Admin (read-only)
# ===========================================


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = [
        "created_at",
        "mason_code",
        "source_type",
        "points_display",
        "balance_after",
        "memo",
    ]
    list_filter = ["source_type"]
    search_fields = ["mason__code", "source_id", "memo"]
    date_hierarchy = "created_at"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def mason_code(self, obj):
        return obj.mason.code

    mason_code.short_description = "Mason"

    def points_display(self, obj):
        if obj.points > 0:
            return format_html('<span style="color:green">+{}</span>', obj.points)
        return format_html('<span style="color:red">{}</span>', obj.points)

    points_display.short_description = "Points"


# ===========================================
# BagLift Admin
# ===========================================


@admin.register(BagLift)
class BagLiftAdmin(admin.ModelAdmin):
    list_display = ["purchase_date", "mason", "bag_count", "points_credited", "status_badge", "approved_by"]
    list_filter = ["status", "purchase_date"]
    search_fields = ["mason__code", "mason__name"]
    raw_id_fields = ["mason"]
    readonly_fields = ["status", "approved_by", "approved_at", "created_at", "updated_at"]
    actions = ["approve", "reject"]

    def status_badge(self, obj):
        return _status_badge(obj)

    status_badge.short_description = "Status"

    @admin.action(description="Approve selected bag lifts")
    def approve(self, request, queryset):
        _run_transitions(self, request, queryset, bag_lift_service.transition, "approved")

    @admin.action(description="Reject selected bag lifts")
    def reject(self, request, queryset):
        _run_transitions(self, request, queryset, bag_lift_service.transition, "rejected")


# ===========================================
# Reward & Redemption Admin
# ===========================================


@admin.register(Reward)
class RewardAdmin(admin.ModelAdmin):
    list_display = ["name", "point_cost", "stock", "total_available_quantity", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(RewardRedemption)
class RewardRedemptionAdmin(admin.ModelAdmin):
    list_display = ["created_at", "mason", "reward", "quantity", "points_debited", "status_badge"]
    list_filter = ["status"]
    search_fields = ["mason__code", "delivery_name", "delivery_phone"]
    raw_id_fields = ["mason", "reward"]
    readonly_fields = ["status", "points_debited", "created_at", "updated_at"]
    actions = ["approve", "ship", "deliver", "reject"]

    def status_badge(self, obj):
        return _status_badge(obj)

    status_badge.short_description = "Status"

    @admin.action(description="Approve selected redemptions")
    def approve(self, request, queryset):
        _run_transitions(self, request, queryset, redemption_service.transition, "approved")

    @admin.action(description="Mark selected redemptions shipped")
    def ship(self, request, queryset):
        _run_transitions(self, request, queryset, redemption_service.transition, "shipped")

    @admin.action(description="Mark selected redemptions delivered")
    def deliver(self, request, queryset):
        _run_transitions(self, request, queryset, redemption_service.transition, "delivered")

    @admin.action(description="Reject selected redemptions")
    def reject(self, request, queryset):
        _run_transitions(self, request, queryset, redemption_service.transition, "rejected")
