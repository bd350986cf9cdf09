import re
from collections.abc import Iterable, Mapping
from typing import Any

_NON_DIGIT = re.compile(r"\D")

DEFAULT_MASK_KEYS = ("cpf", "email", "telefone", "phone")


def mask_cpf(cpf: str) -> str:
    """'12345678901' -> '123.456.789-**'; short input is left-padded with '*'."""
    digits = _NON_DIGIT.sub("", cpf or "").rjust(11, "*")
    return f"{digits[0:3]}.{digits[3:6]}.{digits[6:9]}-**"


def mask_email(email: str) -> str:
    user, _, domain = str(email or "").partition("@")
    if not domain:
        return "***"
    visible = user[:2]
    return f"{visible}{'*' * (len(user) - len(visible))}@{domain}"


def mask_phone(phone: str) -> str:
    digits = _NON_DIGIT.sub("", phone or "")
    if len(digits) < 8:
        return "********"
    return f"{digits[0:2]} {'*' * len(digits[2:7])}-{digits[7:]}"


def mask_payload(row: Mapping[str, Any], keys: Iterable[str] = DEFAULT_MASK_KEYS) -> dict[str, Any]:
    """Cópia do registro com CPF, e-mail e telefone mascarados."""
    out = dict(row)
    for key in keys:
        value = out.get(key)
        if value is None:
            continue
        if key == "cpf":
            out[key] = mask_cpf(str(value))
        elif key == "email":
            out[key] = mask_email(str(value))
        else:
            out[key] = mask_phone(str(value))
    return out
