from django.urls import path

from .views import BagLiftTransitionView, RedemptionTransitionView

app_name = "masonman"

urlpatterns = [
    path("bag-lifts/<uuid:pk>/", BagLiftTransitionView.as_view(), name="bag-lift-transition"),
    path(
        "redemptions/<uuid:pk>/",
        RedemptionTransitionView.as_view(),
        name="redemption-transition",
    ),
]
