"""Asset endpoint tests."""

import uuid
from decimal import Decimal

import pytest
from httpx import AsyncClient


def _assets_url(portfolio_id: str) -> str:
    return f"/api/v1/portfolios/{portfolio_id}/assets/"


@pytest.mark.asyncio
async def test_create_asset(client: AsyncClient, auth_headers, portfolio_id):
    """A new symbol creates an asset priced from the quote source."""
    response = await client.post(
        _assets_url(portfolio_id),
        json={"ticker_symbol": "aapl", "quantity": "10", "purchase_price": "100.00"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["ticker_symbol"] == "AAPL"
    assert data["portfolio_id"] == portfolio_id
    assert Decimal(data["quantity"]) == Decimal("10")
    assert Decimal(data["current_price"]) == Decimal("150")
    assert data["last_price_update"] is not None
    assert Decimal(data["total_value"]) == Decimal("1500")
    assert Decimal(data["gain_loss"]) == Decimal("500")


@pytest.mark.asyncio
async def test_add_existing_symbol_merges_quantity(
    client: AsyncClient, auth_headers, portfolio_id
):
    """Buying a held symbol only increases quantity; purchase price is kept."""
    first = await client.post(
        _assets_url(portfolio_id),
        json={"ticker_symbol": "AAPL", "quantity": "10", "purchase_price": "100"},
        headers=auth_headers,
    )
    second = await client.post(
        _assets_url(portfolio_id),
        json={"ticker_symbol": "AAPL", "quantity": "5", "purchase_price": "200"},
        headers=auth_headers,
    )

    assert first.status_code == 201
    assert second.status_code == 200
    data = second.json()
    assert data["id"] == first.json()["id"]
    assert Decimal(data["quantity"]) == Decimal("15")
    assert Decimal(data["purchase_price"]) == Decimal("100")

    listing = await client.get(_assets_url(portfolio_id), headers=auth_headers)
    assert len(listing.json()) == 1


@pytest.mark.asyncio
async def test_create_asset_without_quote(
    client: AsyncClient, auth_headers, portfolio_id, fake_quotes
):
    """The asset is still created when no quote is available; it is valued at zero."""
    response = await client.post(
        _assets_url(portfolio_id),
        json={"ticker_symbol": "ZZZZ", "quantity": "3", "purchase_price": "10"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    data = response.json()
    assert data["current_price"] is None
    assert Decimal(data["total_value"]) == 0
    assert Decimal(data["gain_loss"]) == Decimal("-30")
    assert fake_quotes.calls == ["ZZZZ"]


@pytest.mark.asyncio
async def test_create_asset_validation(client: AsyncClient, auth_headers, portfolio_id):
    for payload in (
        {"ticker_symbol": "AAPL", "quantity": "0", "purchase_price": "10"},
        {"ticker_symbol": "AAPL", "quantity": "1", "purchase_price": "-1"},
        {"ticker_symbol": "", "quantity": "1", "purchase_price": "10"},
    ):
        response = await client.post(
            _assets_url(portfolio_id), json=payload, headers=auth_headers
        )
        assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_asset_in_foreign_portfolio(
    client: AsyncClient, other_headers, portfolio_id
):
    response = await client.post(
        _assets_url(portfolio_id),
        json={"ticker_symbol": "AAPL", "quantity": "1", "purchase_price": "10"},
        headers=other_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_list_assets_sorted_by_symbol(client: AsyncClient, auth_headers, portfolio_id):
    for symbol in ("MSFT", "AAPL", "GOOGL"):
        await client.post(
            _assets_url(portfolio_id),
            json={"ticker_symbol": symbol, "quantity": "1", "purchase_price": "10"},
            headers=auth_headers,
        )

    response = await client.get(_assets_url(portfolio_id), headers=auth_headers)
    assert response.status_code == 200
    assert [a["ticker_symbol"] for a in response.json()] == ["AAPL", "GOOGL", "MSFT"]


@pytest.mark.asyncio
async def test_get_asset(client: AsyncClient, auth_headers, portfolio_id):
    created = await client.post(
        _assets_url(portfolio_id),
        json={"ticker_symbol": "MSFT", "quantity": "2", "purchase_price": "250"},
        headers=auth_headers,
    )
    asset_id = created.json()["id"]

    response = await client.get(f"{_assets_url(portfolio_id)}{asset_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["ticker_symbol"] == "MSFT"


@pytest.mark.asyncio
async def test_get_missing_asset(client: AsyncClient, auth_headers, portfolio_id):
    response = await client.get(
        f"{_assets_url(portfolio_id)}{uuid.uuid4()}", headers=auth_headers
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_asset(client: AsyncClient, auth_headers, portfolio_id):
    created = await client.post(
        _assets_url(portfolio_id),
        json={"ticker_symbol": "AAPL", "quantity": "1", "purchase_price": "10"},
        headers=auth_headers,
    )
    asset_id = created.json()["id"]

    response = await client.delete(f"{_assets_url(portfolio_id)}{asset_id}", headers=auth_headers)
    assert response.status_code == 204

    again = await client.delete(f"{_assets_url(portfolio_id)}{asset_id}", headers=auth_headers)
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_delete_asset_through_wrong_portfolio(
    client: AsyncClient, auth_headers, portfolio_id
):
    """An asset addressed through a portfolio it does not belong to is rejected."""
    created = await client.post(
        _assets_url(portfolio_id),
        json={"ticker_symbol": "AAPL", "quantity": "1", "purchase_price": "10"},
        headers=auth_headers,
    )
    asset_id = created.json()["id"]

    other = await client.post(
        "/api/v1/portfolios/", json={"name": "Second"}, headers=auth_headers
    )
    other_portfolio_id = other.json()["id"]

    response = await client.delete(
        f"{_assets_url(other_portfolio_id)}{asset_id}", headers=auth_headers
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Asset does not belong to this portfolio"

    # Still there
    still = await client.get(f"{_assets_url(portfolio_id)}{asset_id}", headers=auth_headers)
    assert still.status_code == 200
