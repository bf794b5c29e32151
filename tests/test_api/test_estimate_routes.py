"""API tests for the fee estimate routes.
Ensures service errors map to the right status codes.
"""

import pytest
from fastapi.testclient import TestClient

from mbs_estimate.api.deps import get_estimator
from mbs_estimate.api.main import app
from mbs_estimate.services.estimate_service import EstimateService

client = TestClient(app)


@pytest.fixture(autouse=True)
def reset_dependency_overrides():
    """Ensure dependency overrides are isolated per test."""
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def use_lookup():
    """Serve estimates from the given lookup service."""

    def _use(lookup):
        app.dependency_overrides[get_estimator] = lambda: EstimateService(lookup)

    return _use


# =============================================================================
# Single Item
# =============================================================================


@pytest.mark.api
def test_single_estimate(use_lookup, fake_lookup):
    use_lookup(fake_lookup)

    response = client.post(
        "/api/estimates/single",
        json={"item_code": "30175", "charged_fee": "500", "assistant_gap_fee": "50"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["medicare_rebate"] == 285.7
    assert payload["health_fund_rebate"] == 95.2
    assert payload["out_of_pocket"] == 119.1
    assert payload["assistant_item_code"] == "51300"
    assert payload["total_out_of_pocket"] == 169.1


@pytest.mark.api
def test_single_estimate_not_found(use_lookup, fake_lookup):
    use_lookup(fake_lookup)

    response = client.post(
        "/api/estimates/single", json={"item_code": "99999", "charged_fee": 100}
    )

    assert response.status_code == 404
    assert response.json() == {"detail": "MBS Item 99999 not found or is not current."}


@pytest.mark.api
def test_single_estimate_negative_fee(use_lookup, fake_lookup):
    use_lookup(fake_lookup)

    response = client.post(
        "/api/estimates/single", json={"item_code": "30175", "charged_fee": -10}
    )

    assert response.status_code == 400


@pytest.mark.api
def test_single_estimate_store_failure(use_lookup, failing_lookup):
    use_lookup(failing_lookup)

    response = client.post(
        "/api/estimates/single", json={"item_code": "30175", "charged_fee": 500}
    )

    assert response.status_code == 500
    assert "Error fetching data from the fee schedule" in response.json()["detail"]


# =============================================================================
# Multiple Items
# =============================================================================


@pytest.mark.api
def test_multiple_estimate(use_lookup, make_lookup, make_record, assistant_51303):
    use_lookup(
        make_lookup(
            [
                make_record("100", "1000.00", is_assist_eligible=True),
                make_record("200", "800.00"),
                make_record("300", "600.00"),
                assistant_51303,
            ]
        )
    )

    response = client.post(
        "/api/estimates/multiple",
        json={
            "item_codes": ["300", "100", "200", "404"],
            "total_charged_fee": 2000,
            "assistant_gap_fee": 100,
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert [line["item_code"] for line in payload["lines"]] == ["100", "200", "300"]
    assert [line["effective_fee"] for line in payload["lines"]] == [1000.0, 400.0, 150.0]
    assert payload["total_effective_fee"] == 1550.0
    assert payload["assistant_item_code"] == "51303"
    assert payload["assistant"]["rule_fee"] == 200.0
    assert payload["totals"]["out_of_pocket"] == 550.0
    assert payload["lookup_errors"] == ["MBS Item 404 not found or is not current."]


@pytest.mark.api
def test_multiple_estimate_all_items_missing(use_lookup, make_lookup):
    use_lookup(make_lookup())

    response = client.post(
        "/api/estimates/multiple",
        json={"item_codes": ["111", "222"], "total_charged_fee": 500},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == (
        "MBS Item 111 not found or is not current.; "
        "MBS Item 222 not found or is not current."
    )


@pytest.mark.api
def test_multiple_estimate_requires_items(use_lookup, fake_lookup):
    use_lookup(fake_lookup)

    response = client.post(
        "/api/estimates/multiple", json={"item_codes": [], "total_charged_fee": 500}
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Please select at least one MBS item."}


# =============================================================================
# Malformed Requests
# =============================================================================


@pytest.mark.api
def test_single_estimate_non_numeric_fee(use_lookup, fake_lookup):
    use_lookup(fake_lookup)

    response = client.post(
        "/api/estimates/single", json={"item_code": "30175", "charged_fee": "abc"}
    )

    assert response.status_code == 400
    assert response.json() == {
        "detail": "Please enter a valid positive number for the charged fee."
    }


@pytest.mark.api
def test_multiple_estimate_non_numeric_fee(use_lookup, fake_lookup):
    use_lookup(fake_lookup)

    response = client.post(
        "/api/estimates/multiple",
        json={"item_codes": ["30175"], "total_charged_fee": "lots"},
    )

    assert response.status_code == 400
    assert response.json() == {
        "detail": "Please enter a valid positive number for the charged fee."
    }


@pytest.mark.api
def test_single_estimate_missing_item_code(use_lookup, fake_lookup):
    use_lookup(fake_lookup)

    response = client.post("/api/estimates/single", json={"charged_fee": 100})

    assert response.status_code == 400
    assert response.json()["detail"].startswith("item_code:")
