"""Integration tests for the /dogs endpoints."""

import uuid

import pytest
from services.accounts_service.models import Dog, DogStatus, RelationshipStatus, Role
from sqlalchemy import select
from tests.factories import (
    DogFactory,
    DogRelationshipFactory,
    UserFactory,
    make_auth_user,
)


async def _users(db_session, *roles):
    users = [UserFactory.create(role=role) for role in roles]
    db_session.add_all(users)
    await db_session.commit()
    return users


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_dog(accounts_client, override_auth, db_session):
    (owner,) = await _users(db_session, Role.HANDLER)
    override_auth(owner)

    response = await accounts_client.post(
        "/dogs/",
        json={
            "name": "Luna",
            "breed": "Labrador Retriever",
            "gender": "FEMALE_SPAYED",
            "weight": 55,
            "birth_date": "2023-03-10",
        },
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Luna"
    assert data["owner_id"] == str(owner.id)
    assert data["status"] == "IN_TRAINING"
    assert data["registration_num"].startswith("DOG-")
    stored = await db_session.scalar(select(Dog).where(Dog.id == uuid.UUID(data["id"])))
    assert stored.organization_id == owner.organization_id


@pytest.mark.asyncio
@pytest.mark.integration
async def test_register_dog_validation(accounts_client, override_auth, db_session):
    (owner,) = await _users(db_session, Role.HANDLER)
    override_auth(owner)

    response = await accounts_client.post(
        "/dogs/",
        json={
            "name": "Luna",
            "weight": 0,
            "training_start_date": "2024-05-01",
            "training_end_date": "2024-01-01",
        },
    )

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_list_my_dogs_with_team(accounts_client, override_auth, db_session):
    owner, trainer, other = await _users(
        db_session, Role.HANDLER, Role.TRAINER, Role.HANDLER
    )
    mine = DogFactory.create(owner_id=owner.id, name="Max")
    theirs = DogFactory.create(owner_id=other.id, name="Rex")
    db_session.add_all([mine, theirs])
    await db_session.flush()
    db_session.add(
        DogRelationshipFactory.create(mine.id, trainer.id, can_manage_dogs=True)
    )
    await db_session.commit()
    override_auth(owner)

    response = await accounts_client.get("/dogs/")

    assert response.status_code == 200
    dogs = response.json()
    assert [dog["name"] for dog in dogs] == ["Max"]
    (member,) = dogs[0]["team_members"]
    assert member["id"] == str(trainer.id)
    assert member["role"] == "TRAINER"
    assert member["relationship"] == "TRAINER"
    assert member["permissions"] == {"can_view": True, "can_edit": False, "can_manage": True}


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_dog_as_owner(accounts_client, override_auth, db_session):
    (owner,) = await _users(db_session, Role.HANDLER)
    dog = DogFactory.create(owner_id=owner.id)
    db_session.add(dog)
    await db_session.commit()
    override_auth(owner)

    response = await accounts_client.get(f"/dogs/{dog.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["owner"]["id"] == str(owner.id)
    assert data["team_members"] == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_dog_through_view_permission(accounts_client, override_auth, db_session):
    owner, aide = await _users(db_session, Role.HANDLER, Role.AIDE)
    dog = DogFactory.create(owner_id=owner.id)
    db_session.add(dog)
    await db_session.flush()
    db_session.add(DogRelationshipFactory.create(dog.id, aide.id, can_view_profile=True))
    await db_session.commit()
    override_auth(aide)

    response = await accounts_client.get(f"/dogs/{dog.id}")

    assert response.status_code == 200
    assert response.json()["id"] == str(dog.id)


@pytest.mark.asyncio
@pytest.mark.integration
@pytest.mark.parametrize(
    "relationship",
    [
        None,
        {"can_view_profile": False, "can_manage_dogs": True},
        {"can_view_profile": True, "status": RelationshipStatus.DECLINED},
    ],
)
async def test_get_dog_hidden_without_view_permission(
    accounts_client, override_auth, db_session, relationship
):
    owner, stranger = await _users(db_session, Role.HANDLER, Role.TRAINER)
    dog = DogFactory.create(owner_id=owner.id)
    db_session.add(dog)
    await db_session.flush()
    if relationship is not None:
        db_session.add(DogRelationshipFactory.create(dog.id, stranger.id, **relationship))
    await db_session.commit()
    override_auth(stranger)

    response = await accounts_client.get(f"/dogs/{dog.id}")

    assert response.status_code == 404
    assert response.json()["detail"] == (
        "Dog not found or you don't have permission to view it"
    )


@pytest.mark.asyncio
@pytest.mark.integration
async def test_missing_dog_is_not_found(accounts_client, override_auth, db_session):
    (owner,) = await _users(db_session, Role.HANDLER)
    override_auth(owner)

    response = await accounts_client.get(f"/dogs/{uuid.uuid4()}")

    assert response.status_code == 404


@pytest.mark.asyncio
@pytest.mark.integration
async def test_owner_updates_status(accounts_client, override_auth, db_session):
    (owner,) = await _users(db_session, Role.HANDLER)
    dog = DogFactory.create(owner_id=owner.id)
    db_session.add(dog)
    await db_session.commit()
    override_auth(owner)

    response = await accounts_client.patch(
        f"/dogs/{dog.id}/status",
        json={"status": "RETIRED", "status_reason": "Age"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "RETIRED"
    assert data["status_reason"] == "Age"
    assert data["status_date"] is not None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_manager_updates_status(accounts_client, override_auth, db_session):
    owner, trainer = await _users(db_session, Role.HANDLER, Role.TRAINER)
    dog = DogFactory.create(owner_id=owner.id)
    db_session.add(dog)
    await db_session.flush()
    db_session.add(DogRelationshipFactory.create(dog.id, trainer.id, can_manage_dogs=True))
    await db_session.commit()
    override_auth(trainer)

    response = await accounts_client.patch(
        f"/dogs/{dog.id}/status", json={"status": "ACTIVE"}
    )

    assert response.status_code == 200
    stored = await db_session.scalar(select(Dog.status).where(Dog.id == dog.id))
    assert stored == DogStatus.ACTIVE


@pytest.mark.asyncio
@pytest.mark.integration
async def test_viewer_cannot_update_status(accounts_client, override_auth, db_session):
    owner, trainer = await _users(db_session, Role.HANDLER, Role.TRAINER)
    dog = DogFactory.create(owner_id=owner.id)
    db_session.add(dog)
    await db_session.flush()
    db_session.add(DogRelationshipFactory.create(dog.id, trainer.id, can_view_profile=True))
    await db_session.commit()
    override_auth(trainer)

    response = await accounts_client.patch(
        f"/dogs/{dog.id}/status", json={"status": "WASHED_OUT"}
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "You don't have permission to update this dog"


@pytest.mark.asyncio
@pytest.mark.integration
async def test_update_status_rejects_unknown_status(
    accounts_client, override_auth, db_session
):
    (owner,) = await _users(db_session, Role.HANDLER)
    dog = DogFactory.create(owner_id=owner.id)
    db_session.add(dog)
    await db_session.commit()
    override_auth(owner)

    response = await accounts_client.patch(
        f"/dogs/{dog.id}/status", json={"status": "ADOPTED"}
    )

    assert response.status_code == 422


@pytest.mark.asyncio
@pytest.mark.integration
async def test_dog_stats(accounts_client, override_auth, db_session):
    owner, other = await _users(db_session, Role.HANDLER, Role.HANDLER)
    db_session.add_all(
        [
            DogFactory.create(owner_id=owner.id, status=DogStatus.ACTIVE),
            DogFactory.create(owner_id=owner.id, status=DogStatus.ACTIVE),
            DogFactory.create(owner_id=owner.id, status=DogStatus.IN_MEMORIAM),
            DogFactory.create(owner_id=other.id, status=DogStatus.RETIRED),
        ]
    )
    await db_session.commit()
    override_auth(owner)

    response = await accounts_client.get("/dogs/stats")

    assert response.status_code == 200
    assert response.json() == {
        "total": 3,
        "active": 2,
        "in_training": 0,
        "retired": 0,
        "washed_out": 0,
        "in_memoriam": 1,
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_dogs_require_registration(accounts_client, override_auth):
    override_auth(make_auth_user("not-registered"))

    response = await accounts_client.get("/dogs/")

    assert response.status_code == 404
