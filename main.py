from typing import Annotated, Protocol

from rich.pretty import pprint

from jackfruit import *


class Logger(Protocol):
    def info(self, message: str) -> None: ...


@mark(aliases("b"))
def build(
        configArg: str,
        logger: Logger,
        retries: Annotated[int, required()] = 3,
) -> int:
    """
    Build the project.

    Parameters
    - configArg: Path of the configuration file
    - retries: Number of attempts
    """
    return 0


if __name__ == '__main__':
    pprint(assemble(discover(build)))
