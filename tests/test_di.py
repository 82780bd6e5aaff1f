from typing import Protocol

import pytest

from fleet_usage.di import Container


class Greeter(Protocol):
    def greet(self) -> str:
        ...


class EnglishGreeter:
    def greet(self) -> str:
        return "hello"


class Welcome:
    def __init__(self, greeter: Greeter, punctuation: str = "!"):
        self.greeter = greeter
        self.punctuation = punctuation

    def message(self) -> str:
        return self.greeter.greet() + self.punctuation


class TestContainer:
    """Registration and resolution by interface type."""

    def test_register_and_resolve(self):
        container = Container()
        greeter = EnglishGreeter()
        container.register(Greeter, greeter)

        assert container.resolve(Greeter) is greeter

    def test_factory_result_is_cached(self):
        container = Container()
        container.register_factory(Greeter, EnglishGreeter)

        assert container.resolve(Greeter) is container.resolve(Greeter)

    def test_missing_registration(self):
        with pytest.raises(KeyError, match="Greeter"):
            Container().resolve(Greeter)


class TestInject:
    """Constructor and function injection from type hints."""

    def test_inject_class(self):
        container = Container()
        container.register(Greeter, EnglishGreeter())

        welcome = container.inject(Welcome)()

        assert welcome.message() == "hello!"

    def test_explicit_arguments_win(self):
        container = Container()
        container.register(Greeter, EnglishGreeter())

        class Shouting:
            def greet(self):
                return "HELLO"

        welcome = container.inject(Welcome)(Shouting(), punctuation="?")

        assert welcome.message() == "HELLO?"

    def test_inject_function(self):
        container = Container()
        container.register(Greeter, EnglishGreeter())

        @container.inject
        def shout(greeter: Greeter) -> str:
            return greeter.greet().upper()

        assert shout() == "HELLO"

    def test_unregistered_dependency_is_reported_by_python(self):
        with pytest.raises(TypeError):
            Container().inject(Welcome)()
