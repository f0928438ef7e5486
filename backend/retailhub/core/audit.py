"""
Audit logging for security-critical and stock-moving operations.

One JSON line per event on the "audit" logger so entries can be shipped to
centralized logging. Passwords and tokens are never logged.
"""
import logging
import json
from datetime import datetime, timezone
from typing import Any, Optional, Dict

audit_logger = logging.getLogger("audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Central audit logging."""

    @staticmethod
    def log_authentication(action: str, email: str, success: bool, reason: str = ""):
        """
        Log authentication events ("login", "logout", "failed_login", "create_user").

        Usage:
            AuditLog.log_authentication("failed_login", "clerk@shop.com", False, reason="Invalid password")
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": f"auth.{action}",
            "email": email,
            "success": success,
        }
        if reason and not success:
            log_entry["reason"] = reason

        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_action(
        action: str,  # "create", "update", "delete", "admit", "dispatch", "receive"
        resource_type: str,  # "batch", "inventory", "product", "store", ...
        resource_id,
        user=None,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a change to a stock record: who, what, when.

        Usage:
            AuditLog.log_action("admit", "inventory", item.id, current_user, changes={"barcode": code})
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": f"{resource_type}.{action}",
            "resource_id": resource_id,
        }
        if user is not None:
            log_entry["user_id"] = user.id
            log_entry["user_email"] = user.email
        if changes:
            log_entry["changes"] = changes

        audit_logger.info(json.dumps(log_entry, default=str))

    @staticmethod
    def log_access_denied(action: str, user_id: int, role: str, reason: str):
        """Log a request refused by role gating."""
        log_entry = {
            "timestamp": _now(),
            "event_severity": "WARNING",
            "event_type": "access_denied",
            "action": action,
            "user_id": user_id,
            "role": role,
            "reason": reason,
        }
        audit_logger.warning(json.dumps(log_entry))
