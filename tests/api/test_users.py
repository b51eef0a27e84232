import pytest
from httpx import AsyncClient
from starlette import status

# Помечаем все тесты в модуле как асинхронные
pytestmark = pytest.mark.asyncio


async def save_profile(client: AsyncClient, headers: dict[str, str], display_name: str) -> dict:
    payload = {
        "email": f"{display_name.lower()}@example.com",
        "displayName": display_name,
        "photoURL": f"https://example.com/{display_name.lower()}.png",
    }
    response = await client.put("/api/v1/users/me", json=payload, headers=headers)
    assert response.status_code == status.HTTP_200_OK, response.text
    return response.json()


async def test_upsert_profile(test_client: AsyncClient, user_auth_headers: dict[str, str], user_id: str):
    """Профиль создается при первом сохранении и заменяется при повторном."""
    created = await save_profile(test_client, user_auth_headers, "Alice")
    assert created["id"] == user_id
    assert created["photoURL"] == "https://example.com/alice.png"

    updated = await save_profile(test_client, user_auth_headers, "Alicia")
    assert updated["id"] == user_id
    assert updated["displayName"] == "Alicia"

    response = await test_client.get("/api/v1/users/me", headers=user_auth_headers)
    assert response.json()["displayName"] == "Alicia"


async def test_missing_profile_returns_404(test_client: AsyncClient, user_auth_headers: dict[str, str]):
    response = await test_client.get("/api/v1/users/nobody", headers=user_auth_headers)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"][0]["type"] == "user_not_found"


async def test_search_by_display_name_prefix(
    test_client: AsyncClient,
    user_auth_headers: dict[str, str],
    auth_headers_for,
):
    """Поиск по префиксу отображаемого имени в алфавитном порядке с ограничением количества."""
    await save_profile(test_client, auth_headers_for("u1"), "Marta")
    await save_profile(test_client, auth_headers_for("u2"), "Mark")
    await save_profile(test_client, auth_headers_for("u3"), "Max")
    await save_profile(test_client, auth_headers_for("u4"), "Olga")

    response = await test_client.get(
        "/api/v1/users/search",
        params={"prefix": "Mar", "limit": 5},
        headers=user_auth_headers,
    )
    assert [profile["displayName"] for profile in response.json()] == ["Mark", "Marta"]

    limited = await test_client.get("/api/v1/users/search", params={"prefix": "Ma", "limit": 2}, headers=user_auth_headers)
    assert len(limited.json()) == 2


async def test_search_with_blank_prefix_is_empty(test_client: AsyncClient, user_auth_headers: dict[str, str]):
    await save_profile(test_client, user_auth_headers, "Alice")

    response = await test_client.get("/api/v1/users/search", params={"prefix": "  "}, headers=user_auth_headers)

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


async def test_search_treats_wildcards_literally(test_client: AsyncClient, user_auth_headers: dict[str, str]):
    """Символы % и _ в префиксе не являются шаблонами."""
    await save_profile(test_client, user_auth_headers, "Alice")

    response = await test_client.get("/api/v1/users/search", params={"prefix": "%"}, headers=user_auth_headers)

    assert response.json() == []


async def test_habits_of_stranger_forbidden(
    test_client: AsyncClient,
    user_auth_headers: dict[str, str],
    another_auth_headers: dict[str, str],
    another_user_id: str,
):
    """Привычки недоступны пользователю без принятой дружбы."""
    await test_client.post("/api/v1/habits/", json={"name": "Yoga", "target": 7}, headers=another_auth_headers)

    response = await test_client.get(f"/api/v1/users/{another_user_id}/habits", headers=user_auth_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN


async def test_habits_of_friend_visible_in_both_directions(
    test_client: AsyncClient,
    user_auth_headers: dict[str, str],
    another_auth_headers: dict[str, str],
    user_id: str,
    another_user_id: str,
):
    """После принятия заявки привычки видны обоим участникам."""
    await test_client.post("/api/v1/habits/", json={"name": "Yoga", "target": 7}, headers=another_auth_headers)
    await test_client.post("/api/v1/habits/", json={"name": "Chess", "target": 2}, headers=user_auth_headers)

    edge = await test_client.post("/api/v1/friends/", json={"friendId": another_user_id}, headers=user_auth_headers)

    # Заявка еще не принята
    pending = await test_client.get(f"/api/v1/users/{another_user_id}/habits", headers=user_auth_headers)
    assert pending.status_code == status.HTTP_403_FORBIDDEN

    await test_client.patch(
        f"/api/v1/friends/{edge.json()['id']}",
        json={"status": "accepted"},
        headers=another_auth_headers,
    )

    forward = await test_client.get(f"/api/v1/users/{another_user_id}/habits", headers=user_auth_headers)
    assert [habit["name"] for habit in forward.json()] == ["Yoga"]

    backward = await test_client.get(f"/api/v1/users/{user_id}/habits", headers=another_auth_headers)
    assert [habit["name"] for habit in backward.json()] == ["Chess"]
