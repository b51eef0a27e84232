"""
Друзья и сводка их прогресса.

Дружба - направленная связь `userId -> friendId`. Принятие заявки меняет статус только исходной
связи заявителя и не создает обратную связь для принявшего пользователя: в его собственном списке
(`userId == я`) такая дружба не появляется.
"""

from datetime import date, datetime
from typing import Iterable, NamedTuple

from .calculator import overall_completion
from .config import settings
from .exceptions import PersistenceError
from .logging import tracker_log as log
from .models import DateRange, DocumentModel, FriendEdge, FriendStatus, Habit
from .state import AppState, StateHolder
from .store import DocumentStore, StoreError
from .week_window import month_start, parse_day, week_end, week_start


class ProgressWindows(NamedTuple):
    """Общий процент выполнения за три фиксированных окна."""

    daily: int
    weekly: int
    monthly: int


class FriendProgress(DocumentModel):
    """Карточка прогресса друга в ленте."""

    user_id: str
    display_name: str
    photo_url: str | None = None
    progress: ProgressWindows


class UserSearchResult(DocumentModel):
    """Результат поиска пользователя с отметками о связи с текущим пользователем."""

    id: str
    display_name: str
    photo_url: str | None = None
    is_friend: bool = False
    is_pending: bool = False


def friend_progress(friend_user_id: str, habits: Iterable[Habit], now: date | datetime) -> ProgressWindows:
    """
    Считает прогресс друга за сегодня, текущую неделю и текущий месяц.

    Учитываются все привычки друга без фильтра по тегам.

    Args:
        friend_user_id: ID друга.
        habits: Привычки друга.
        now: Момент расчета.

    Returns:
        Проценты выполнения по окнам [сегодня], [пн..вс текущей недели], [1-е число..сегодня].
    """
    day = parse_day(now)
    habits = list(habits)

    progress = ProgressWindows(
        daily=overall_completion(habits, DateRange(day, day)),
        weekly=overall_completion(habits, DateRange(week_start(day), week_end(day))),
        monthly=overall_completion(habits, DateRange(month_start(day), day)),
    )

    log.debug(f"Прогресс друга ID {friend_user_id} на {day}: {progress}")
    return progress


class FriendCoordinator:
    """
    Операции с дружбой текущего пользователя.

    Пишет в общее состояние сессии только список исходящих связей (`AppState.friends`).
    """

    def __init__(self, store: DocumentStore, holder: StateHolder):
        self.store = store
        self.holder = holder

    @property
    def state(self) -> AppState:
        return self.holder.current

    @property
    def user_id(self) -> str:
        return self.holder.user_id

    def _failed(self, message: str, error_type: str, exc: StoreError) -> PersistenceError:
        self.holder.apply(lambda state: state.with_error(message))
        log.error(f"{message} Пользователь ID: {self.user_id}. Причина: {exc}")
        return PersistenceError(message=message, error_type=error_type)

    async def load_friends(self) -> list[FriendEdge]:
        """
        Загружает связи, где текущий пользователь - владелец.

        Raises:
            PersistenceError: Если хранилище недоступно.
        """
        try:
            edges = await self.store.fetch_friend_edges()
        except StoreError as exc:
            raise self._failed("Не удалось загрузить друзей.", "load_friends_failed", exc) from exc

        self.holder.apply(lambda state: state.with_friends(edges).with_error(None))
        log.debug(f"Загружено {len(edges)} связей дружбы пользователя ID: {self.user_id}.")
        return edges

    async def send_request(self, friend_id: str) -> FriendEdge:
        """
        Создает заявку `я -> friend_id` в статусе PENDING и перезагружает список связей.

        Raises:
            PersistenceError: Если хранилище не приняло заявку.
        """
        try:
            edge = await self.store.add_friend_edge(friend_id)
        except StoreError as exc:
            raise self._failed("Не удалось отправить заявку в друзья.", "friend_request_failed", exc) from exc

        log.info(f"Пользователь ID {self.user_id} отправил заявку в друзья пользователю ID {friend_id}.")
        await self.load_friends()
        return edge

    async def accept(self, requester_id: str) -> FriendEdge | None:
        """
        Принимает заявку от `requester_id`.

        Статус меняется только у связи {userId: requester_id, friendId: я}. Новая связь не создается,
        связи, где владелец - текущий пользователь, не затрагиваются.

        Returns:
            Принятая связь или None, если заявки нет.

        Raises:
            PersistenceError: Если хранилище недоступно.
        """
        try:
            edges = await self.store.find_friend_edges(requester_id, self.user_id)
            if not edges:
                log.warning(f"Заявка от пользователя ID {requester_id} к ID {self.user_id} не найдена.")
                return None

            edge = edges[0]
            await self.store.update_friend_edge(edge.id, FriendStatus.ACCEPTED)
        except StoreError as exc:
            raise self._failed("Не удалось принять заявку в друзья.", "friend_accept_failed", exc) from exc

        log.info(f"Пользователь ID {self.user_id} принял заявку от пользователя ID {requester_id}.")
        await self.load_friends()
        return edge.model_copy(update={"status": FriendStatus.ACCEPTED})

    async def remove(self, friend_id: str) -> bool:
        """
        Удаляет связь `я -> friend_id`, если она есть, и перезагружает список связей.

        Returns:
            True, если связь была удалена.

        Raises:
            PersistenceError: Если хранилище недоступно.
        """
        try:
            edges = await self.store.find_friend_edges(self.user_id, friend_id)
            if edges:
                await self.store.delete_friend_edge(edges[0].id)
        except StoreError as exc:
            raise self._failed("Не удалось удалить друга.", "friend_remove_failed", exc) from exc

        if edges:
            log.info(f"Пользователь ID {self.user_id} удалил связь с пользователем ID {friend_id}.")
        else:
            log.warning(f"Связь пользователя ID {self.user_id} с ID {friend_id} не найдена.")

        await self.load_friends()
        return bool(edges)

    async def progress_for_friends(self, now: date | datetime) -> list[FriendProgress]:
        """
        Сводка прогресса по всем принятым исходящим связям.

        Друзья без профиля пропускаются.

        Raises:
            PersistenceError: Если хранилище недоступно.
        """
        accepted = [edge for edge in self.state.friends if edge.status == FriendStatus.ACCEPTED]
        result: list[FriendProgress] = []

        try:
            for edge in accepted:
                profile = await self.store.fetch_user(edge.friend_id)
                if profile is None:
                    log.warning(f"Профиль друга ID {edge.friend_id} не найден, друг пропущен.")
                    continue

                habits = await self.store.fetch_habits(edge.friend_id)
                result.append(
                    FriendProgress(
                        user_id=edge.friend_id,
                        display_name=profile.display_name,
                        photo_url=profile.photo_url,
                        progress=friend_progress(edge.friend_id, habits, now),
                    )
                )
        except StoreError as exc:
            raise self._failed("Не удалось загрузить прогресс друзей.", "friend_progress_failed", exc) from exc

        return result

    async def search_users(self, term: str) -> list[UserSearchResult]:
        """
        Ищет пользователей по префиксу отображаемого имени.

        Пустой запрос дает пустой список, текущий пользователь исключается из результатов.
        Отметки `is_friend` / `is_pending` берутся из известных связей в обоих направлениях.

        Raises:
            PersistenceError: Если хранилище недоступно.
        """
        prefix = term.strip()
        if not prefix:
            return []

        try:
            profiles = await self.store.search_users(prefix, settings.USER_SEARCH_LIMIT)
        except StoreError as exc:
            raise self._failed("Не удалось выполнить поиск пользователей.", "user_search_failed", exc) from exc

        results = []
        for profile in profiles:
            if profile.id == self.user_id:
                continue

            edge = next(
                (
                    edge
                    for edge in self.state.friends
                    if {edge.user_id, edge.friend_id} == {self.user_id, profile.id}
                ),
                None,
            )
            results.append(
                UserSearchResult(
                    id=profile.id,
                    display_name=profile.display_name,
                    photo_url=profile.photo_url,
                    is_friend=edge is not None and edge.status == FriendStatus.ACCEPTED,
                    is_pending=edge is not None and edge.status == FriendStatus.PENDING,
                )
            )

        return results
