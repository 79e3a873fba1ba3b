"""Registry of runnable test cases.

Test bodies register here under an identifier. Parameterized bodies are
expanded into one closure per parameter value, so every instance can be
listed, filtered and run on its own.

Example:
    from gputest.registry import CaseRegistry
    from gputest.params import WHOLE_SUBMAT, combine
    from gputest.mat_type import all_types

    registry = CaseRegistry()

    @registry.register("Add", "Accuracy", combine(all_types(), WHOLE_SUBMAT))
    def add_accuracy(params):
        mat_type, roi = params
        ...

    results = registry.run_all("Add.*")
"""
from __future__ import annotations

import fnmatch
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Literal, TYPE_CHECKING

from .errors import UnsupportedFeatureError
from .params import param_id

if TYPE_CHECKING:
    from .devices import DeviceCatalog

logger = logging.getLogger(__name__)

CaseFunc = Callable[[], None]
CaseStatus = Literal["passed", "failed", "skipped"]


@dataclass
class RegisteredCase:
    """A runnable test instance."""
    test_id: str
    func: CaseFunc
    param: Any = None

    @property
    def display_name(self) -> str:
        if self.param is None:
            return self.test_id
        return f"{self.test_id} {param_id(self.param)}"


@dataclass
class CaseResult:
    """Outcome of running one test instance."""
    test_id: str
    status: CaseStatus
    message: str = ""
    error: BaseException | None = None

    @property
    def passed(self) -> bool:
        return self.status == "passed"


class CaseRegistry:
    """Mapping from test identifier to a runnable closure.

    Args:
        catalog: Device catalog whose active device is reset after a
            failing body; no reset without one
    """

    def __init__(self, catalog: DeviceCatalog | None = None):
        self.catalog = catalog
        self._cases: dict[str, RegisteredCase] = {}

    def add(self, test_id: str, func: CaseFunc, param: Any = None) -> RegisteredCase:
        """Register a closure under an explicit identifier.

        Raises:
            ValueError: If the identifier is taken
        """
        if test_id in self._cases:
            raise ValueError(f"Test already registered: {test_id}")
        case = RegisteredCase(test_id, func, param)
        self._cases[test_id] = case
        return case

    def register(self, case_name: str, test_name: str, params: Iterable[Any] | None = None):
        """Decorator registering a test body.

        Without ``params`` the body takes no arguments and is registered as
        ``Case.Name``. With ``params`` it takes one parameter and is
        registered once per value as ``Case.Name/<index>``.
        """
        def decorator(func: Callable[..., None]) -> Callable[..., None]:
            base_id = f"{case_name}.{test_name}"
            if params is None:
                self.add(base_id, func)
            else:
                for index, param in enumerate(params):
                    self.add(f"{base_id}/{index}", _bind(func, param), param)
            return func
        return decorator

    def get(self, test_id: str) -> RegisteredCase | None:
        return self._cases.get(test_id)

    def ids(self, pattern: str | None = None) -> list[str]:
        """Registered identifiers in registration order, optionally filtered by glob."""
        if pattern is None:
            return list(self._cases)
        return [test_id for test_id in self._cases if fnmatch.fnmatchcase(test_id, pattern)]

    def run(self, test_id: str) -> CaseResult:
        """Run one test instance.

        Unsupported features skip the test. Assertion errors fail it. Other
        exceptions propagate. The device is reset whenever the body fails.

        Raises:
            KeyError: If the identifier is unknown
        """
        case = self._cases.get(test_id)
        if case is None:
            raise KeyError(f"Unknown test: {test_id}")

        try:
            case.func()
        except UnsupportedFeatureError as e:
            logger.info(f"SKIP {case.display_name}: {e}")
            return CaseResult(test_id, "skipped", str(e), e)
        except AssertionError as e:
            self._reset_device()
            logger.info(f"FAIL {case.display_name}: {e}")
            return CaseResult(test_id, "failed", str(e), e)
        except Exception:
            self._reset_device()
            raise

        logger.debug(f"PASS {case.display_name}")
        return CaseResult(test_id, "passed")

    def run_all(self, pattern: str | None = None) -> list[CaseResult]:
        """Run every registered instance matching the glob pattern."""
        return [self.run(test_id) for test_id in self.ids(pattern)]

    def _reset_device(self) -> None:
        if self.catalog is not None:
            self.catalog.reset_device()

    def __len__(self) -> int:
        return len(self._cases)

    def __contains__(self, test_id: str) -> bool:
        return test_id in self._cases


def _bind(func: Callable[[Any], None], param: Any) -> CaseFunc:
    def run() -> None:
        func(param)
    return run


__all__ = [
    'RegisteredCase',
    'CaseResult',
    'CaseRegistry',
]
