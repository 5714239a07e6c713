"""Context variables for structured logging."""

from contextvars import ContextVar

_trace_id: ContextVar[str] = ContextVar("trace_id", default="")
_operation: ContextVar[str] = ContextVar("operation", default="")
_tenant_id: ContextVar[str] = ContextVar("tenant_id", default="")
_company_id: ContextVar[str] = ContextVar("company_id", default="")


def set_log_context(
    trace_id: str | None = None,
    operation: str | None = None,
    tenant_id: str | None = None,
    company_id: str | None = None,
) -> None:
    if trace_id is not None:
        _trace_id.set(trace_id)
    if operation is not None:
        _operation.set(operation)
    if tenant_id is not None:
        _tenant_id.set(tenant_id)
    if company_id is not None:
        _company_id.set(company_id)


def get_log_context() -> dict[str, str]:
    return {
        "trace_id": _trace_id.get(),
        "operation": _operation.get(),
        "tenant_id": _tenant_id.get(),
        "company_id": _company_id.get(),
    }


def clear_log_context() -> None:
    _trace_id.set("")
    _operation.set("")
    _tenant_id.set("")
    _company_id.set("")
