# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
# ==============================================================================

"""
Join-all fan-out used for concurrent reads and writes within one event.
"""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class TaskOutcome(Generic[T]):
    item: Any
    result: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_all(
    fn: Callable[[Any], T], items: Iterable[Any], max_workers: int = 8
) -> List[TaskOutcome[T]]:
    """
    Runs `fn` over every item on a thread pool and waits for all of them.

    A failing call never cancels the others; its exception is captured in
    the matching TaskOutcome. Outcomes are returned in input order.
    """
    items = list(items)
    if not items:
        return []

    outcomes = []
    with concurrent.futures.ThreadPoolExecutor(
        max_workers=min(max_workers, len(items))
    ) as executor:
        futures = [executor.submit(fn, item) for item in items]
        for item, future in zip(items, futures):
            try:
                outcomes.append(TaskOutcome(item=item, result=future.result()))
            except Exception as e:
                outcomes.append(TaskOutcome(item=item, error=e))
    return outcomes
