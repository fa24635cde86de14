from __future__ import annotations

from typing import Iterable, Optional
from sqlmodel import Session, select

from meeting_insights.models.task import Task


class TasksRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_many(self, rows: Iterable[Task]) -> None:
        for row in rows:
            self.session.add(row)
        self.session.commit()

    def list_by_meeting(self, meeting_id: int) -> list[Task]:
        statement = select(Task).where(Task.meeting_id == meeting_id).order_by(Task.id.asc())
        return list(self.session.exec(statement))

    def get_for_meeting(self, meeting_id: int, task_id: int) -> Optional[Task]:
        task = self.session.get(Task, task_id)
        if task is None or task.meeting_id != meeting_id:
            return None
        return task

    def set_completed(self, task: Task, completed: bool) -> Task:
        task.completed = completed
        self.session.add(task)
        self.session.commit()
        self.session.refresh(task)
        return task
