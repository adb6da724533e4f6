"""Integration tests for the public trainer directory."""

import pytest
from services.accounts_service.models import Role
from tests.factories import UserFactory


def _trainer(**overrides):
    defaults = {"role": Role.TRAINER, "last_name": "Trainer"}
    defaults.update(overrides)
    return UserFactory.create(**defaults)


@pytest.mark.asyncio
@pytest.mark.integration
async def test_directory_lists_only_visible_trainers(accounts_client, db_session):
    listed = _trainer(first_name="Listed", state="TX")
    hidden = _trainer(first_name="Hidden", show_in_directory=False)
    private = _trainer(first_name="Private", public_profile=False)
    handler = UserFactory.create(first_name="Handler")
    aide = UserFactory.create(first_name="Aide", role=Role.AIDE)
    db_session.add_all([listed, hidden, private, handler, aide])
    await db_session.commit()

    response = await accounts_client.get("/trainers/")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert [t["id"] for t in data["items"]] == [str(listed.id)]
    assert data["items"][0]["email"] is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_directory_search_and_state_filter(accounts_client, db_session):
    db_session.add_all(
        [
            _trainer(first_name="Maya", business_name="Paws Academy", state="TX"),
            _trainer(first_name="Leo", city="Portland", state="OR"),
            _trainer(first_name="Sam", state="TX"),
        ]
    )
    await db_session.commit()

    response = await accounts_client.get("/trainers/", params={"search": "paws"})
    assert [t["first_name"] for t in response.json()["items"]] == ["Maya"]

    response = await accounts_client.get("/trainers/", params={"state": "TX"})
    assert response.json()["total"] == 2

    response = await accounts_client.get("/trainers/", params={"search": "portland"})
    assert [t["first_name"] for t in response.json()["items"]] == ["Leo"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_directory_paging(accounts_client, db_session):
    db_session.add_all([_trainer(last_name=f"Trainer{i}") for i in range(5)])
    await db_session.commit()

    response = await accounts_client.get("/trainers/", params={"page": 2, "limit": 2})

    data = response.json()
    assert data["total"] == 5
    assert data["page"] == 2
    assert [t["last_name"] for t in data["items"]] == ["Trainer2", "Trainer3"]


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_trainer(accounts_client, db_session):
    trainer = _trainer(public_phone=True, phone="555-0199")
    handler = UserFactory.create()
    db_session.add_all([trainer, handler])
    await db_session.commit()

    response = await accounts_client.get(f"/trainers/{trainer.id}")
    assert response.status_code == 200
    assert response.json()["phone"] == "555-0199"

    response = await accounts_client.get(f"/trainers/{handler.id}")
    assert response.status_code == 404
