import unittest

import pytest

from xcontainer import Container, CyclicDependencyError, Provider, Transient


class Engine:
    def __init__(self, cylinders: int):
        self.cylinders = cylinders


class V8Provider(Provider):
    calls = 0

    @classmethod
    def provide(cls, abstract, container):
        cls.calls += 1
        return Engine(cylinders=8)


class Clock(Provider):
    def __init__(self, tick: int):
        self.tick = tick

    @staticmethod
    def provide(abstract, container):
        return Clock(tick=1)


class TestProviders(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()
        V8Provider.calls = 0

    def test_registered_provider_builds_instance(self):
        self.cont.provider(Engine, V8Provider)

        engine = self.cont.get(Engine)
        assert engine.cylinders == 8

    def test_provided_instance_is_cached(self):
        self.cont.provider(Engine, V8Provider)

        assert self.cont.get(Engine) is self.cont.get(Engine)
        assert V8Provider.calls == 1

    def test_provided_instance_for_transient_type_is_not_cached(self):
        self.cont.provider(Engine, V8Provider)
        self.cont.transient(Engine)

        assert self.cont.get(Engine) is not self.cont.get(Engine)
        assert V8Provider.calls == 2

    def test_provider_receives_requested_token_and_container(self):
        received = []

        class Recorder:
            @classmethod
            def provide(cls, abstract, container):
                received.append((abstract, container))
                return Engine(cylinders=4)

        self.cont.provider("engine", Recorder)
        self.cont.get("engine")
        assert received == [("engine", self.cont)]

    def test_provider_registered_for_abstract_token_with_binding(self):
        class Car: ...

        class SportsCar(Car): ...

        class CarProvider:
            @staticmethod
            def provide(abstract, container):
                return SportsCar()

        self.cont.bind(Car, SportsCar)
        self.cont.provider(Car, CarProvider)
        assert isinstance(self.cont.get(Car), SportsCar)

    def test_provider_for_abstract_token_can_build_bound_concrete(self):
        class Car: ...

        class SportsCar(Car):
            def __init__(self, tuned: bool = False):
                self.tuned = tuned

        class TunedCarProvider:
            @staticmethod
            def provide(abstract, container):
                return container.resolve(SportsCar, tuned=True)

        self.cont.bind(Car, SportsCar)
        self.cont.provider(Car, TunedCarProvider)

        car = self.cont.get(Car)
        assert isinstance(car, SportsCar)
        assert car.tuned
        assert self.cont.get(Car) is car

    def test_provider_for_abstract_token_can_decorate_shared_concrete(self):
        class Car: ...

        class SportsCar(Car):
            def __init__(self):
                self.spoiler = False

        class SpoilerProvider:
            @staticmethod
            def provide(abstract, container):
                car = container.get(SportsCar)
                car.spoiler = True
                return car

        self.cont.bind(Car, SportsCar)
        self.cont.provider(Car, SpoilerProvider)

        car = self.cont.get(Car)
        assert car.spoiler
        assert self.cont.get(SportsCar) is car

    def test_provider_for_abstract_token_requesting_itself_is_a_cycle(self):
        class Car: ...

        class SportsCar(Car): ...

        class Loop:
            @staticmethod
            def provide(abstract, container):
                return container.get(abstract)

        self.cont.bind(Car, SportsCar)
        self.cont.provider(Car, Loop)

        with pytest.raises(CyclicDependencyError) as ctx:
            self.cont.get(Car)
        assert ctx.value.chain == [Car, Car]

    def test_provider_registered_for_concrete_token_is_used_through_binding(self):
        self.cont.bind("engine", Engine)
        self.cont.provider(Engine, V8Provider)

        assert self.cont.get("engine").cylinders == 8
        assert self.cont.get("engine") is self.cont.get(Engine)

    def test_provider_can_resolve_from_container(self):
        class Fuel: ...

        class Car:
            def __init__(self, fuel: Fuel):
                self.fuel = fuel

        class CarProvider:
            @classmethod
            def provide(cls, abstract, container):
                return Car(container.get(Fuel))

        self.cont.provider(Car, CarProvider)
        car = self.cont.get(Car)
        assert car.fuel is self.cont.get(Fuel)

    def test_provider_object_instance(self):
        class Factory:
            def __init__(self, cylinders: int):
                self.cylinders = cylinders

            def provide(self, abstract, container):
                return Engine(self.cylinders)

        self.cont.provider(Engine, Factory(12))
        assert self.cont.get(Engine).cylinders == 12

    def test_provider_takes_precedence_over_reflection(self):
        class Service:
            def __init__(self, name: str = "reflected"):
                self.name = name

        class ServiceProvider:
            @staticmethod
            def provide(abstract, container):
                return Service(name="provided")

        self.cont.provider(Service, ServiceProvider)
        assert self.cont.get(Service).name == "provided"

    def test_provider_returning_none_falls_back_to_reflection(self):
        class Service: ...

        class Declining:
            @staticmethod
            def provide(abstract, container):
                return None

        self.cont.provider(Service, Declining)
        assert isinstance(self.cont.get(Service), Service)

    def test_provided_transient_marker_is_not_cached(self):
        class Ticket(Transient): ...

        class TicketProvider:
            @staticmethod
            def provide(abstract, container):
                return Ticket()

        self.cont.provider("ticket", TicketProvider)
        assert self.cont.get("ticket") is not self.cont.get("ticket")

    def test_provider_without_provide_method_is_rejected(self):
        class NotAProvider: ...

        with pytest.raises(TypeError):
            self.cont.provider(Engine, NotAProvider)

    def test_provider_with_instance_method_on_class_is_rejected(self):
        class NeedsReceiver:
            def provide(self, abstract, container):
                return Engine(1)

        with pytest.raises(TypeError):
            self.cont.provider(Engine, NeedsReceiver)

    def test_provider_protocol_itself_is_rejected(self):
        with pytest.raises(TypeError):
            self.cont.provider(Engine, Provider)


class TestSelfProvidingTypes(unittest.TestCase):
    def test_self_providing_class_is_used(self):
        c = Container()

        clock = c.get(Clock)
        assert clock.tick == 1
        assert c.get(Clock) is clock

    def test_self_providing_class_reached_through_binding(self):
        c = Container()
        c.bind("clock", Clock)

        assert c.get("clock").tick == 1

    def test_self_providing_can_be_disabled(self):
        c = Container(self_providing=False)

        with pytest.raises(RuntimeError):
            c.get(Clock)

    def test_explicit_provider_still_works_when_self_providing_disabled(self):
        c = Container(self_providing=False)
        c.provider(Engine, V8Provider)

        assert c.get(Engine).cylinders == 8

    def test_explicit_provider_overrides_self_providing_class(self):
        class SlowClock:
            @staticmethod
            def provide(abstract, container):
                return Clock(tick=60)

        c = Container()
        c.provider(Clock, SlowClock)
        assert c.get(Clock).tick == 60

    def test_instance_of_provider_protocol_is_structural(self):
        assert isinstance(V8Provider(), Provider)
        assert isinstance(Clock(tick=0), Provider)
