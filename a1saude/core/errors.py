"""
Error taxonomy shared by services, exporters and the HTTP layer.

Every error carries the operation it came from so the API layer can map it
to a status code and a readable message without inspecting strings.
"""
from __future__ import annotations

from typing import Any


class A1SaudeError(Exception):
    """Erro base da aplicação."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, *, operation: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.operation:
            body["operation"] = self.operation
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(A1SaudeError):
    """Campos obrigatórios ausentes ou inválidos."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, fields: dict[str, str], *, operation: str | None = None):
        names = ", ".join(fields)
        super().__init__(
            f"Campos inválidos: {names}",
            operation=operation,
            details={"fields": [{"field": f, "message": m} for f, m in fields.items()]},
        )
        self.fields = fields


class PersistenceError(A1SaudeError):
    """Falha de leitura/escrita no banco."""

    code = "PERSISTENCE_ERROR"
    status_code = 500

    def __init__(self, operation: str, cause: BaseException | None = None):
        # O texto do driver traz SQL e parâmetros; fica só em self.cause, nunca na resposta
        super().__init__(f"Falha de persistência em {operation}", operation=operation)
        self.cause = cause


class InputShapeError(A1SaudeError, TypeError):
    """Exportador recebeu algo que não é uma sequência de registros."""

    code = "INPUT_SHAPE_ERROR"
    status_code = 400

    def __init__(self, operation: str, received: Any, expected: str = "sequence of mappings"):
        received_type = type(received).__name__
        super().__init__(
            f"{operation} expects a {expected}, got {received_type}",
            operation=operation,
            details={"received": received_type, "expected": expected},
        )
