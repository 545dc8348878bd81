import asyncio

from loguru import logger

from treesync import ComponentTree, MemoryHost, Synchronizer
from treesync.logging_config import configure_logging


async def main() -> None:
    configure_logging(verbose=True)
    tree = ComponentTree()
    root = tree.add(state={"title": "Counter"})
    child = tree.add(parent=root, state={"count": 0})

    host = MemoryHost()
    sync = Synchronizer(tree, host)
    sync.init_sync()

    for _ in range(10):
        tree.set_state(child, count=tree.node(child).state["count"] + 1)
        sync.update_sync(child)
    await asyncio.sleep(sync.dispatcher.window * 2)

    logger.info("Host received {} call(s), state {}", len(host.calls), host.data)


if __name__ == "__main__":
    asyncio.run(main())
