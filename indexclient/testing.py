import logging
import uuid
from contextlib import contextmanager

from indexclient.errors import IndexClientError

logger = logging.getLogger(__name__)


def unique_index_name(prefix="indexclient"):
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@contextmanager
def temporary_index(client, prefix="indexclient", timeout=None):
    """Yield a uniquely named index and delete it on every exit path.

    The index is not created up front; the service creates it on the first
    write. Deletion waits for its task so the name is free when the block ends.
    """
    index = client.get_index(unique_index_name(prefix))
    try:
        yield index
    except BaseException:
        # Cleanup must not mask the block's own failure.
        try:
            client.delete_index(index.name).wait(timeout=timeout)
        except IndexClientError:
            logger.warning(
                "could not remove temporary index '%s'", index.name, exc_info=True
            )
        raise
    logger.debug("removing temporary index '%s'", index.name)
    client.delete_index(index.name).wait(timeout=timeout)
