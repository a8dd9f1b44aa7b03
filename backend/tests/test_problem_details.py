from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from lab2dent.domain_errors import DomainError, NotFoundError, TransitionError
from lab2dent.problem_details import build_problem_details_response, domain_error_handler


def test_problem_details_payload_contains_stable_code_and_rfc7807_fields() -> None:
    response = build_problem_details_response(
        DomainError(
            code="SAMPLE_ERROR",
            http_status=409,
            message="sample failed",
            details={"sample": True},
        )
    )

    assert response.status_code == 409
    assert response.media_type == "application/problem+json"

    body = response.body.decode("utf-8")
    assert '"type":"https://api.lab2dent.local/problems/sample_error"' in body
    assert '"title":"Conflict"' in body
    assert '"status":409' in body
    assert '"detail":"sample failed"' in body
    assert '"code":"SAMPLE_ERROR"' in body
    assert '"details":{"sample":true}' in body


def test_problem_details_omits_details_when_none() -> None:
    response = build_problem_details_response(NotFoundError("Order not found", code="ORDER_NOT_FOUND"))

    body = response.body.decode("utf-8")
    assert response.status_code == 404
    assert '"title":"Not Found"' in body
    assert '"code":"ORDER_NOT_FOUND"' in body
    assert '"details"' not in body


def test_fastapi_exception_handler_maps_domain_error_to_problem_details() -> None:
    app = FastAPI()
    app.add_exception_handler(DomainError, domain_error_handler)

    @app.get("/boom")
    def _boom():
        raise TransitionError("Invalid status transition: Preparation -> Shipped", details={"from": "Preparation"})

    client = TestClient(app)
    response = client.get("/boom")

    assert response.status_code == 409
    assert response.headers["content-type"].startswith("application/problem+json")
    payload = response.json()
    assert payload["code"] == "INVALID_STATUS_TRANSITION"
    assert payload["detail"] == "Invalid status transition: Preparation -> Shipped"
    assert payload["details"] == {"from": "Preparation"}
