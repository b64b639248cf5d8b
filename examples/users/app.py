"""Users — a small controller-based app.

Demonstrates exact and pattern routes, typed placeholders, named
middleware, interface bindings, and constructor injection.

Run:
    uvicorn app:app
    routeline routes app:app
    routeline dispatch app:app GET /users/1
"""

from abc import ABC, abstractmethod

from routeline import App
from routeline.errors import HTTPError

requests: list[str] = []


class IUserRepository(ABC):
    @abstractmethod
    def all(self) -> list[str]: ...

    @abstractmethod
    def get(self, user_id: int) -> str | None: ...


class InMemoryUserRepository(IUserRepository):
    def __init__(self) -> None:
        self._users = {1: "ada", 2: "grace"}

    def all(self) -> list[str]:
        return list(self._users.values())

    def get(self, user_id: int) -> str | None:
        return self._users.get(user_id)


class UserService:
    def __init__(self, repository: IUserRepository) -> None:
        self.repository = repository

    def name_of(self, user_id: int) -> str:
        name = self.repository.get(user_id)
        if name is None:
            raise HTTPError(404, f"No user {user_id}.")
        return name


class UserController:
    def __init__(self, users: UserService, greeting: str = "Hello") -> None:
        self.users = users
        self.greeting = greeting

    def index(self) -> str:
        return ", ".join(self.users.repository.all())

    def show(self, params: dict[str, str]) -> str:
        return f"{self.greeting}, {self.users.name_of(int(params['id']))}!"

    def create(self) -> str:
        return "created"


class AdminController:
    def index(self) -> str:
        return "admin"


class RequestLog:
    def __call__(self) -> None:
        requests.append("seen")


def lockdown() -> None:
    raise HTTPError(403, "Admin area is closed.")


routes = {
    "/": {"controller": UserController, "method": "index", "middlewares": ["log"]},
    "users": {"controller": UserController, "method": "create", "methods": ["POST"]},
    "users/{id:int}": {"controller": UserController, "method": "show", "middlewares": ["log"]},
    "admin": {"controller": AdminController, "method": "index", "middlewares": ["lockdown"]},
}

app = App(
    routes,
    {"log": RequestLog, "lockdown": lockdown},
    bindings={IUserRepository: InMemoryUserRepository},
)
