"""
Координатор изменений привычек.

Единственный писатель списка привычек в `AppState`. Политика сохранения зависит от операции:

- create / update_fields / delete - сначала запись в хранилище, затем изменение локального состояния.
  При ошибке локальное состояние не меняется, выбрасывается PersistenceError.
- set_status / reorder - оптимистично: сначала локальное состояние, затем запись в хранилище.
  При ошибке предварительное состояние отбрасывается полной перезагрузкой, выбрасывается SyncError.
"""

from datetime import date, datetime
from typing import Callable

from .config import settings
from .exceptions import NotFoundError, PersistenceError, SyncError
from .ledger import new_week, set_day_status
from .logging import tracker_log as log
from .models import DayStatus, Habit, HabitDraft, HabitUpdate
from .state import AppState, OperationToken, StateHolder
from .store import DocumentStore, StoreError
from .week_window import today as current_day


class HabitMutationCoordinator:
    """
    Выполняет мутирующие операции над привычками пользователя.

    Attributes:
        store: Хранилище документов.
        holder: Общая ссылка на состояние сессии.
        last_operation: Токен последней начатой операции (для UI и тестов).
    """

    def __init__(
        self,
        store: DocumentStore,
        holder: StateHolder,
        today_provider: Callable[[], date] | None = None,
    ):
        """
        Args:
            store: Хранилище документов.
            holder: Состояние сессии пользователя.
            today_provider: Источник даты "сегодня". По умолчанию - текущая дата в `settings.TIMEZONE`.
        """
        self.store = store
        self.holder = holder
        self._today = today_provider or (lambda: current_day(settings.TIMEZONE))
        self.last_operation: OperationToken | None = None

    @property
    def state(self) -> AppState:
        return self.holder.current

    @property
    def user_id(self) -> str:
        return self.holder.user_id

    def _start(self, kind: str, habit_id: str | None = None) -> OperationToken:
        self.last_operation = OperationToken(kind, habit_id).begin()
        return self.last_operation

    def _lookup(self, habit_id: str, action: str) -> Habit | None:
        try:
            return self.state.get_habit(habit_id)
        except NotFoundError as exc:
            # Привычка могла быть удалена в другой вкладке, операция просто пропускается
            log.warning(f"Операция '{action}' пропущена: {exc}")
            return None

    def _persistence_failed(self, token: OperationToken, message: str, exc: StoreError) -> PersistenceError:
        token.invalidate(str(exc))
        self.holder.apply(lambda state: state.with_error(message))
        log.error(f"{message} Пользователь ID: {self.user_id}. Причина: {exc}")
        return PersistenceError(message=message, error_type=f"{token.kind}_failed")

    async def _rollback(self, token: OperationToken, message: str, exc: StoreError) -> SyncError:
        """
        Отбрасывает предварительное состояние перезагрузкой из хранилища.

        Если перезагрузка тоже не удалась, предварительное состояние остается до следующей загрузки.
        """
        token.invalidate(str(exc))
        log.error(f"{message} Пользователь ID: {self.user_id}. Причина: {exc}. Перезагрузка состояния.")

        try:
            await self.load()
        except PersistenceError as reload_exc:
            log.error(f"Перезагрузка после ошибки синхронизации не удалась: {reload_exc}")
            message = f"{message} Перезагрузка не удалась, данные могут быть устаревшими."

        self.holder.apply(lambda state: state.with_error(message))
        return SyncError(message=message, error_type=f"{token.kind}_failed")

    async def load(self) -> AppState:
        """
        Загружает авторитетный список привычек пользователя из хранилища.

        Raises:
            PersistenceError: Если хранилище недоступно.
        """
        try:
            habits = await self.store.fetch_habits(self.user_id)
        except StoreError as exc:
            message = "Не удалось загрузить привычки."
            self.holder.apply(lambda state: state.with_error(message))
            log.error(f"{message} Пользователь ID: {self.user_id}. Причина: {exc}")
            raise PersistenceError(message=message, error_type="load_failed") from exc

        log.debug(f"Загружено {len(habits)} привычек пользователя ID: {self.user_id}.")
        return self.holder.apply(lambda state: state.with_habits(habits).with_error(None))

    async def create(self, draft: HabitDraft) -> Habit:
        """
        Создает привычку: порядок `max(order) + 1`, одна нейтральная запись текущей недели.

        Args:
            draft: Проверенные данные новой привычки.

        Returns:
            Созданная привычка с ID, выданным хранилищем.

        Raises:
            PersistenceError: Хранилище не приняло документ (локальное состояние не изменено).
        """
        token = self._start("create")

        # max + 1, а не количество: после удалений номера не пересекаются
        order = self.state.max_order() + 1
        document = draft.model_dump(mode="json", by_alias=True)
        document["order"] = order
        document["weeklyProgress"] = [new_week(self._today()).model_dump(mode="json", by_alias=True)]

        try:
            habit = await self.store.add_habit(document)
        except StoreError as exc:
            raise self._persistence_failed(token, "Не удалось создать привычку.", exc) from exc

        self.holder.apply(lambda state: state.append_habit(habit).with_error(None))
        token.confirm()

        log.info(f"Привычка ID {habit.id} '{habit.name}' создана (порядок {order}).")
        return habit

    async def update_fields(self, habit_id: str, update: HabitUpdate) -> Habit | None:
        """
        Частично обновляет поля привычки: сначала в хранилище, затем локально.

        Returns:
            Обновленная привычка или None, если привычки нет в локальном состоянии.

        Raises:
            PersistenceError: Хранилище не приняло изменение (локальное состояние не изменено).
        """
        habit = self._lookup(habit_id, "update_fields")
        if habit is None:
            return None

        changes = update.changed_fields()
        if not changes:
            log.debug(f"Обновление привычки ID {habit_id} без изменений пропущено.")
            return habit

        token = self._start("update", habit_id)

        try:
            await self.store.update_habit(habit_id, update.to_document())
        except StoreError as exc:
            raise self._persistence_failed(token, f"Не удалось обновить привычку {habit_id}.", exc) from exc

        updated = habit.model_copy(update=changes)
        self.holder.apply(lambda state: state.replace_habit(updated).with_error(None))
        token.confirm()

        log.info(f"Привычка ID {habit_id} обновлена. Поля: {sorted(changes)}")
        return updated

    async def delete(self, habit_id: str) -> Habit | None:
        """
        Удаляет привычку: сначала в хранилище, затем локально.

        Returns:
            Удаленная привычка или None, если ее не было в локальном состоянии.

        Raises:
            PersistenceError: Хранилище не приняло удаление (локальное состояние не изменено).
        """
        habit = self._lookup(habit_id, "delete")
        if habit is None:
            return None

        token = self._start("delete", habit_id)

        try:
            await self.store.delete_habit(habit_id)
        except StoreError as exc:
            raise self._persistence_failed(token, f"Не удалось удалить привычку {habit_id}.", exc) from exc

        self.holder.apply(lambda state: state.remove_habit(habit_id).with_error(None))
        token.confirm()

        log.info(f"Привычка ID {habit_id} удалена.")
        return habit

    async def set_status(
        self,
        habit_id: str,
        day: date | datetime | str,
        status: DayStatus | str,
    ) -> Habit | None:
        """
        Оптимистично устанавливает статус дня и сохраняет весь журнал привычки.

        Args:
            habit_id: ID привычки.
            day: Дата (date или строка YYYY-MM-DD).
            status: Новый статус.

        Returns:
            Привычка с новым статусом дня; исходная привычка, если данные некорректны;
            None, если привычки нет в локальном состоянии.

        Raises:
            SyncError: Хранилище не приняло журнал, состояние перезагружено.
        """
        habit = self._lookup(habit_id, "set_status")
        if habit is None:
            return None

        updated = set_day_status(habit, day, status)
        if updated is habit:
            # Некорректная дата или статус: изменять и сохранять нечего
            return habit

        token = self._start("set_status", habit_id)
        self.holder.apply(lambda state: state.replace_habit(updated))

        ledger = [record.model_dump(mode="json", by_alias=True) for record in updated.weekly_progress]

        try:
            await self.store.update_habit(habit_id, {"weeklyProgress": ledger})
        except StoreError as exc:
            raise await self._rollback(token, f"Не удалось сохранить статус дня привычки {habit_id}.", exc) from exc

        self.holder.apply(lambda state: state.with_error(None))
        token.confirm()

        log.debug(f"Статус дня {day} привычки ID {habit_id} сохранен.")
        return updated

    async def reorder(self, source_id: str, destination_id: str) -> list[Habit] | None:
        """
        Перемещает привычку `source_id` на позицию `destination_id`.

        Перемещаемая привычка занимает индекс цели, привычки между старой и новой позицией
        сдвигаются на одну. Поле `order` каждой привычки становится равным ее индексу.
        Все измененные значения сохраняются одним атомарным пакетом.

        Returns:
            Новый порядок привычек или None, если одного из ID нет в локальном состоянии.

        Raises:
            SyncError: Хранилище не приняло пакет, состояние перезагружено.
        """
        habits = list(self.state.habits)
        ids = [habit.id for habit in habits]

        if source_id not in ids or destination_id not in ids:
            log.warning(f"Перемещение пропущено: привычка {source_id} или {destination_id} не найдена.")
            return None

        moved = habits.pop(ids.index(source_id))
        habits.insert(ids.index(destination_id), moved)

        reordered = [habit.model_copy(update={"order": index}) for index, habit in enumerate(habits)]
        previous_orders = {habit.id: habit.order for habit in self.state.habits}
        changed = {habit.id: habit.order for habit in reordered if previous_orders[habit.id] != habit.order}

        if not changed:
            return reordered

        token = self._start("reorder", source_id)
        self.holder.apply(lambda state: state.with_habits(reordered))

        try:
            await self.store.commit_order_batch(changed)
        except StoreError as exc:
            raise await self._rollback(token, "Не удалось сохранить порядок привычек.", exc) from exc

        self.holder.apply(lambda state: state.with_error(None))
        token.confirm()

        log.info(f"Привычка ID {source_id} перемещена на позицию {ids.index(destination_id)}. Изменено: {len(changed)}")
        return reordered
