"""End-to-end behaviour of the default hooks exported at package level."""

from __future__ import annotations

from typing import Any

import pytest

from lib_privacy_scrub import FILTERED, privacy_before_breadcrumb, privacy_before_send


def test_request_data_message_content_is_filtered() -> None:
    event = {"request": {"data": {"message": "Sensitive recovery message", "content": "Task description", "user_id": "123"}}}

    scrubbed = privacy_before_send(event, {})

    assert scrubbed["request"]["data"] == {"message": FILTERED, "content": FILTERED, "user_id": "123"}


def test_error_message_email_is_redacted() -> None:
    assert privacy_before_send({"message": "Error for user test@example.com"})["message"] == "Error for user [email]"


def test_user_keeps_id_and_loses_personal_info() -> None:
    event = {"user": {"id": "user-123", "email": "test@example.com", "username": "testuser", "ip_address": "192.168.1.1"}}

    assert privacy_before_send(event)["user"] == {"id": "user-123"}


def test_exception_value_loses_quoted_text() -> None:
    event = {"exception": {"values": [{"type": "Error", "value": 'Failed to save message: "Help me stay sober"'}]}}

    assert "Help me" not in privacy_before_send(event)["exception"]["values"][0]["value"]


def test_http_breadcrumb_reports_table_only() -> None:
    breadcrumb = {
        "category": "http",
        "data": {"url": "https://project.supabase.co/rest/v1/messages?select=*", "method": "GET", "status_code": 200},
    }

    data = privacy_before_breadcrumb(breadcrumb, {})["data"]

    assert data == {"method": "GET", "status_code": 200, "table": "messages"}


def test_navigation_breadcrumb_loses_route_params() -> None:
    breadcrumb = {"category": "navigation", "data": {"from": "/(tabs)/index", "to": "/(tabs)/messages?user_id=123&message_id=456"}}

    assert privacy_before_breadcrumb(breadcrumb)["data"] == {"from": "/(tabs)/index", "to": "/(tabs)/messages"}


def test_deeply_nested_request_data() -> None:
    event = {"request": {"data": {"l1": {"l2": {"l3": {"l4": {"l5": {"message": "deep", "email": "test@example.com"}}}}}}}}

    leaf = privacy_before_send(event)["request"]["data"]["l1"]["l2"]["l3"]["l4"]["l5"]

    assert leaf == {"message": FILTERED, "email": FILTERED}


def test_circular_request_data_completes() -> None:
    circular: dict[str, Any] = {"name": "test", "user_id": "123"}
    circular["self"] = circular

    data = privacy_before_send({"request": {"data": circular}})["request"]["data"]

    assert data["name"] == "test"
    assert data["self"] is data


def test_null_values_under_sensitive_keys() -> None:
    event = {"request": {"data": {"message": None, "user_id": "123", "nested": {"email": None, "phone": None}}}}

    data = privacy_before_send(event)["request"]["data"]

    assert data == {"message": FILTERED, "user_id": "123", "nested": {"email": FILTERED, "phone": FILTERED}}


def test_large_message_is_still_redacted() -> None:
    scrubbed = privacy_before_send({"message": f"Error: {'a' * 50000} with email test@example.com"})["message"]

    assert "[email]" in scrubbed
    assert "test@example.com" not in scrubbed


def test_breadcrumb_edge_cases_do_not_raise() -> None:
    null_data = {"category": "navigation", "data": None}

    assert privacy_before_breadcrumb(null_data) is null_data
    assert privacy_before_breadcrumb({"category": "http", "data": {"method": "GET", "url": None}})["data"] == {"method": "GET"}
    assert privacy_before_breadcrumb({"category": "navigation", "data": {"from": "", "to": ""}})["data"] == {"from": "", "to": ""}


def test_request_data_nested_past_recursion_limit_is_redacted(caplog: pytest.LogCaptureFixture) -> None:
    data: dict[str, Any] = {"password": "hunter2"}
    for _ in range(1200):
        data = {"child": data}
    data["password"] = "hunter2"

    scrubbed = privacy_before_send({"request": {"data": data}})

    node = scrubbed["request"]["data"]
    assert node["password"] == FILTERED
    for _ in range(1200):
        node = node["child"]
    assert node == {"password": FILTERED}
    assert "failed with" not in caplog.text
