"""JSON web API for the calculators.

Each ``POST /api/<calculator>`` endpoint takes the calculator's fields as a
JSON object or as form fields, passes them unmodified to the core (which
normalizes them itself) and answers with the result record as JSON. With
``?strict=1`` the form validators run first and field errors come back with
status 422 instead of a best-effort result.

Run locally with ``flask --app fincalc_web.app run`` or ``python -m
fincalc_web.app``; ``FINCALC_WEB_HOST``, ``FINCALC_WEB_PORT`` and
``FINCALC_WEB_DEBUG`` configure the latter.
"""

from __future__ import annotations

import os
from dataclasses import asdict
from typing import Any, Callable, Dict, Mapping, Tuple

from flask import Flask, jsonify, request

from fincalc import __version__
from fincalc.engine import calculate_emi, calculate_loan
from fincalc.growth import (
    calculate_fd,
    calculate_investment,
    calculate_lumpsum,
    calculate_ppf,
    calculate_rd,
    calculate_simple_interest,
    calculate_sip,
)
from fincalc.mortgage import calculate_mortgage
from fincalc.validation import (
    EMI_RULES,
    FD_RULES,
    INVESTMENT_RULES,
    LOAN_RULES,
    LUMPSUM_RULES,
    MORTGAGE_RULES,
    PPF_RULES,
    RD_RULES,
    SIMPLE_INTEREST_RULES,
    SIP_RULES,
    validate_emi_inputs,
    validate_fd_inputs,
    validate_investment_inputs,
    validate_loan_inputs,
    validate_lumpsum_inputs,
    validate_mortgage_inputs,
    validate_ppf_inputs,
    validate_rd_inputs,
    validate_simple_interest_inputs,
    validate_sip_inputs,
)

app = Flask(__name__)

SCHEDULE_PREVIEW_ROWS = 120

# calculator name -> (engine, record validator, accepted fields, rows attribute)
CALCULATORS: Dict[str, Tuple[Callable[..., Any], Callable[[Mapping], Any], Tuple[str, ...], str]] = {
    "loan": (calculate_loan, validate_loan_inputs, tuple(LOAN_RULES), "schedule"),
    "mortgage": (calculate_mortgage, validate_mortgage_inputs, tuple(MORTGAGE_RULES), "schedule"),
    "investment": (calculate_investment, validate_investment_inputs, tuple(INVESTMENT_RULES), "breakdown"),
    "emi": (calculate_emi, validate_emi_inputs, tuple(EMI_RULES), "schedule"),
    "simple-interest": (
        calculate_simple_interest,
        validate_simple_interest_inputs,
        tuple(SIMPLE_INTEREST_RULES),
        "",
    ),
    "sip": (calculate_sip, validate_sip_inputs, tuple(SIP_RULES), "breakdown"),
    "lumpsum": (calculate_lumpsum, validate_lumpsum_inputs, tuple(LUMPSUM_RULES), "breakdown"),
    "fd": (calculate_fd, validate_fd_inputs, tuple(FD_RULES), "breakdown"),
    "rd": (calculate_rd, validate_rd_inputs, tuple(RD_RULES), "breakdown"),
    "ppf": (calculate_ppf, validate_ppf_inputs, tuple(PPF_RULES), "breakdown"),
}

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _request_payload() -> Dict[str, Any]:
    """Return the submitted fields, from a JSON body or from form data."""
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object.")
        return payload
    return request.form.to_dict()


def _truncate_rows(body: Dict[str, Any], rows_key: str, show_full: bool) -> Dict[str, Any]:
    rows = body.get(rows_key) or []
    if show_full or len(rows) <= SCHEDULE_PREVIEW_ROWS:
        return body
    body[rows_key] = rows[:SCHEDULE_PREVIEW_ROWS]
    body["truncated"] = len(rows) - SCHEDULE_PREVIEW_ROWS
    return body


@app.get("/api/health")
def health():
    return jsonify({"status": "ok", "version": __version__})


@app.post("/api/<name>")
def calculate(name: str):
    """Run calculator ``name`` on the submitted fields."""
    if name not in CALCULATORS:
        return jsonify({"error": f"Unknown calculator: {name}"}), 404
    engine, validator, accepted, rows_key = CALCULATORS[name]

    try:
        payload = _request_payload()
    except ValueError as exc:
        return jsonify({"error": str(exc)}), 400

    show_full = _flag(payload.get("full_schedule", request.args.get("full_schedule", "")))
    if _flag(request.args.get("strict", "")):
        outcome = validator(payload)
        if not outcome.is_valid:
            app.logger.info("Rejected %s input: %s", name, outcome.errors)
            return jsonify({"error": "Invalid input", "fields": outcome.errors}), 422
        arguments = dict(outcome.values)
    else:
        # missing fields reach the engine as None and normalize to zero
        arguments = {key: payload.get(key) for key in accepted}

    app.logger.debug("Running %s with %s", name, arguments)
    body = asdict(engine(**arguments))
    if rows_key:
        body = _truncate_rows(body, rows_key, show_full)
    return jsonify(body)


if __name__ == "__main__":
    app.run(
        host=os.environ.get("FINCALC_WEB_HOST", "127.0.0.1"),
        port=int(os.environ.get("FINCALC_WEB_PORT", "8710")),
        debug=os.environ.get("FINCALC_WEB_DEBUG", "") in _TRUTHY,
    )
