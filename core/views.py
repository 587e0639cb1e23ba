import time

from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView


class HealthCheckView(APIView):
    """
    Public uptime probe for the marketplace API.

    Reports database connectivity, plus the payment gateway backend and
    currency this deployment runs with. Answers 503 when the database is
    unreachable.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request, *args, **kwargs):
        started = time.monotonic()

        try:
            connections["default"].ensure_connection()
            db_ok = True
        except OperationalError:
            db_ok = False

        return Response(
            {
                "status": "ok" if db_ok else "degraded",
                "db": db_ok,
                "env": getattr(settings, "ENV", "unknown"),
                "payment_gateway": settings.PAYMENT_GATEWAY["BACKEND"].rsplit(".", 1)[-1],
                "currency": settings.MARKETPLACE_CURRENCY,
                "latency_ms": int((time.monotonic() - started) * 1000),
            },
            status=200 if db_ok else 503,
        )
