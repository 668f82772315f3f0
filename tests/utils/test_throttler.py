import asyncio
import unittest
from asyncio import TaskGroup

from copycheck.utils.throttler import Throttler


class ThrottlerTest(unittest.TestCase):
    def test_limits_running_tasks(self):
        running = 0
        peak = 0

        async def work():
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            return True

        async def run():
            async with TaskGroup() as tg:
                throttler = Throttler(tg, 3)
                tasks = [await throttler.schedule(work()) for _ in range(10)]
            return [task.result() for task in tasks]

        results = asyncio.run(run())

        self.assertEqual([True] * 10, results)
        self.assertEqual(3, peak)

    def test_permit_released_on_failure(self):
        async def fail():
            raise RuntimeError("boom")

        async def succeed():
            return 'done'

        async def run():
            throttler = None
            try:
                async with TaskGroup() as tg:
                    throttler = Throttler(tg, 1)
                    await throttler.schedule(fail())
            except ExceptionGroup:
                pass

            async with TaskGroup() as tg:
                task = await Throttler(tg, 1).schedule(succeed())
            return throttler, task.result()

        throttler, result = asyncio.run(run())
        self.assertEqual('done', result)
        self.assertFalse(throttler._semaphore.locked())

    def test_rejects_non_positive_concurrency(self):
        with self.assertRaises(ValueError):
            Throttler(TaskGroup(), 0)


if __name__ == '__main__':
    unittest.main()
