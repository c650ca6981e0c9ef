"""
Audit trail helper shared by use cases.

Audit entries are written through the caller's unit of work so they
commit or roll back together with the change they describe.
"""

from dataclasses import dataclass
from typing import Any, Optional

from papertrade.domain.accounts.entities import AuditAction
from papertrade.domain.unit_of_work import UnitOfWork


@dataclass(frozen=True)
class RequestContext:
    """Client details captured from the HTTP request.

    Attributes:
        ip_address: Remote address of the caller, if known.
        user_agent: User-Agent header, if sent.
    """

    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


ANONYMOUS = RequestContext()


def record_audit(
    uow: UnitOfWork,
    context: RequestContext,
    *,
    action: AuditAction,
    resource: str,
    user_id: Optional[int] = None,
    resource_id: Optional[Any] = None,
    details: Optional[dict[str, Any]] = None,
) -> None:
    """Append one audit entry inside the open unit of work."""
    uow.audit_logs.add(
        action=action,
        resource=resource,
        user_id=user_id,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=details,
        ip_address=context.ip_address,
        user_agent=context.user_agent,
    )
