import asyncio
import unittest


class IsolatedAsyncioWrapperTestCase(unittest.IsolatedAsyncioTestCase):
    """
    Runs each test in its own event loop and makes sure nothing created by the test outlives it.
    """

    async def asyncTearDown(self) -> None:
        pending = [task for task in asyncio.all_tasks() if task is not asyncio.current_task()]
        for task in pending:
            task.cancel()
        await super().asyncTearDown()
