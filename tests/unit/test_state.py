from __future__ import annotations

import pytest

from dashboard_core.errors import FlowBusyError, UpstreamError
from dashboard_core.state import FlowState, FlowStatus


def test_success_transition_and_dismiss():
    flow = FlowState("prompt")
    assert flow.status is FlowStatus.IDLE

    assert flow.run(lambda x: x * 2, 21) == 42
    assert flow.status is FlowStatus.SUCCESS
    assert flow.result == 42
    assert flow.error is None

    flow.dismiss()
    assert flow.status is FlowStatus.IDLE
    assert flow.result is None


def test_failure_stores_user_message():
    flow = FlowState("prompt")

    def boom():
        raise UpstreamError("cohere", 500, "internal", label="Cohere")

    assert flow.run(boom) is None
    assert flow.status is FlowStatus.ERROR
    assert flow.error == "AI service error: Cohere API error: 500 - internal"


def test_resubmission_while_loading_is_rejected():
    flow = FlowState("analytics")
    flow.start()
    assert flow.busy

    with pytest.raises(FlowBusyError):
        flow.start()
    with pytest.raises(FlowBusyError):
        flow.run(lambda: None)


def test_retry_after_error_starts_from_scratch():
    flow = FlowState("analytics")
    flow.fail("Network error")
    assert flow.run(lambda: "fresh") == "fresh"
    assert flow.status is FlowStatus.SUCCESS
    assert flow.error is None
