import asyncio
from asyncio import TaskGroup, Semaphore


class Throttler:
    """Limits how many tasks of a TaskGroup run at the same time.

    schedule() waits for a free permit before handing the coroutine to the task group; the
    permit goes back when the task finishes, whether it succeeded or not.
    """

    def __init__(self, task_group: TaskGroup, concurrency: int):
        """
        Args:
            task_group: The TaskGroup that owns the scheduled tasks
            concurrency: Maximum number of tasks running at once
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {concurrency}")

        self._task_group = task_group
        self._semaphore = Semaphore(concurrency)

    async def schedule(self, coro, name=None) -> asyncio.Task:
        await self._semaphore.acquire()

        async def wrapper():
            try:
                return await coro
            finally:
                self._semaphore.release()

        try:
            return self._task_group.create_task(wrapper(), name=name)
        except BaseException:
            self._semaphore.release()
            coro.close()
            raise
