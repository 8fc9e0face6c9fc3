"""
Controller base class.
"""

from typing import Any, ClassVar, List


class Controller:
    """
    Base class for controllers.

    Class attributes configure every route of the controller; handler-level
    settings given to the route decorators run after these.

    Example:
        ```python
        @injectable(CatsService)
        class CatsController(Controller):
            prefix = "/cats"
            interceptors = [LoggingInterceptor]

            def __init__(self, cats):
                self.cats = cats

            @GET("/:id", params=[Param("id")], pipes=[ParseIntPipe])
            def find_one(self, id):
                return self.cats.find_one(id)
        ```
    """

    prefix: ClassVar[str] = "/"
    guards: ClassVar[List[Any]] = []
    pipes: ClassVar[List[Any]] = []
    interceptors: ClassVar[List[Any]] = []
    filters: ClassVar[List[Any]] = []
