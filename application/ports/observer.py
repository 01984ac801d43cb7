# application/ports/observer.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable

from domain.run import StepResponse
from domain.steps.http import RequestTemplate

if TYPE_CHECKING:
    from application.services.request_builder import ResolvedRequest


class WorkflowObserver(ABC):
    """
    Display / logging hooks. Side effects only: they cannot change the variable
    store or the control flow of a workflow.
    """

    @abstractmethod
    def before_send(self, template: RequestTemplate, resolved: "ResolvedRequest") -> None:
        ...

    @abstractmethod
    def after_receive(
        self,
        template: RequestTemplate,
        resolved: "ResolvedRequest",
        response: StepResponse,
    ) -> None:
        ...


class NullObserver(WorkflowObserver):
    def before_send(self, template, resolved) -> None:
        return None

    def after_receive(self, template, resolved, response) -> None:
        return None


class CompositeObserver(WorkflowObserver):
    def __init__(self, observers: Iterable[WorkflowObserver]):
        self._observers = list(observers)

    def before_send(self, template, resolved) -> None:
        for o in self._observers:
            o.before_send(template, resolved)

    def after_receive(self, template, resolved, response) -> None:
        for o in self._observers:
            o.after_receive(template, resolved, response)
