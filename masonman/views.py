"""
Masonman transition endpoints.

Thin JSON adapter over LoyaltyService for dashboard use.

Flow:
    1. Requires an authenticated user (authorization and tenant scope
       are enforced by the surrounding project)
    2. Parses {"status": ...} plus optional memo / fulfillmentNotes
    3. Calls the workflow and maps MasonmanError codes to HTTP statuses
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from masonman.exceptions import MasonmanError
from masonman.service import LoyaltyService

logger = logging.getLogger("masonman.views")

ERROR_STATUS = {
    "NOT_FOUND": 404,
    "INVALID_TRANSITION": 400,
    "INSUFFICIENT_STOCK": 400,
    "TRANSACTION_FAILED": 409,
}


def _error(exc: MasonmanError) -> JsonResponse:
    return JsonResponse(exc.as_dict(), status=ERROR_STATUS.get(exc.code, 400))


def _parse(request) -> dict | None:
    try:
        data = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, ValueError):
        return None
    if not isinstance(data, dict) or not isinstance(data.get("status"), str):
        return None
    return data


def _actor(request) -> str | None:
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return None
    return str(user.pk)


class _TransitionView(View):
    def _transition(self, request, pk):
        actor = _actor(request)
        if actor is None:
            return JsonResponse({"error": "Unauthorized"}, status=401)

        data = _parse(request)
        if data is None:
            return JsonResponse({"error": "Invalid status value."}, status=400)

        try:
            return self.apply(pk, data, actor)
        except MasonmanError as exc:
            logger.info("%s %s → %s refused: %s", self.entity, pk, data["status"], exc.code)
            return _error(exc)
        except Exception:
            logger.exception("%s %s: transition failed", self.entity, pk)
            return JsonResponse({"error": "Internal error"}, status=500)


@method_decorator(csrf_exempt, name="dispatch")
class BagLiftTransitionView(_TransitionView):
    """
    PUT bag-lifts/<uuid>/

    Body: {"status": "approved" | "rejected", "memo": "..."}
    """

    entity = "BagLift"

    def put(self, request, pk):
        return self._transition(request, pk)

    def apply(self, pk, data, actor):
        result = LoyaltyService.transition_purchase_credit(
            pk,
            data["status"],
            memo=str(data.get("memo") or ""),
            actor=actor,
        )
        return JsonResponse(
            {
                "message": f"Bag Lift status updated to {result.new_status}.",
                "id": str(result.bag_lift.pk),
                "status": result.new_status,
                "ledgerEntries": [
                    {
                        "id": entry.pk,
                        "masonId": entry.mason_id,
                        "sourceType": entry.source_type,
                        "sourceId": entry.source_id,
                        "points": entry.points,
                        "memo": entry.memo,
                    }
                    for entry in result.ledger_entries
                ],
            }
        )


@method_decorator(csrf_exempt, name="dispatch")
class RedemptionTransitionView(_TransitionView):
    """
    PATCH redemptions/<uuid>/

    Body: {"status": "approved" | "shipped" | "delivered" | "rejected",
           "fulfillmentNotes": "..."}
    """

    entity = "Redemption"

    def patch(self, request, pk):
        return self._transition(request, pk)

    def apply(self, pk, data, actor):
        result = LoyaltyService.transition_redemption(
            pk,
            data["status"],
            fulfillment_notes=str(data.get("fulfillmentNotes") or ""),
            actor=actor,
        )
        return JsonResponse(
            {
                "success": True,
                "id": str(result.redemption.pk),
                "status": result.new_status,
            }
        )
