import pytest

from backend.app import models
from backend.app.services.identity import EntityLookup, IdentityResolver, LookupCache


class CountingLookup:
    def __init__(self, known: dict[str, str]):
        self.known = known
        self.calls: list[str] = []

    def __call__(self, value: str):
        self.calls.append(value)
        return self.known.get(value)


def test_unresolvable_value_is_looked_up_once_per_batch():
    lookup = CountingLookup({})
    resolver = IdentityResolver(lookup, LookupCache(), entity="clients")

    assert resolver.resolve("Desconhecido") is None
    assert resolver.resolve("Desconhecido") is None
    assert resolver.resolve(" Desconhecido ") is None

    assert lookup.calls == ["Desconhecido"]


def test_resolved_value_is_cached():
    lookup = CountingLookup({"Acme": "client-1"})
    resolver = IdentityResolver(lookup, LookupCache(), entity="clients")

    assert resolver.resolve("Acme") == "client-1"
    assert resolver.resolve("Acme") == "client-1"
    assert len(lookup.calls) == 1


def test_blank_values_never_reach_the_lookup():
    lookup = CountingLookup({})
    resolver = IdentityResolver(lookup, LookupCache(), entity="clients")

    assert resolver.resolve(None) is None
    assert resolver.resolve("  ") is None
    assert lookup.calls == []


def test_cache_entries_are_scoped_per_entity():
    cache = LookupCache()
    clients = IdentityResolver(CountingLookup({"X": "client-x"}), cache, entity="clients")
    products = IdentityResolver(CountingLookup({"X": "product-x"}), cache, entity="products")

    assert clients.resolve("X") == "client-x"
    assert products.resolve("X") == "product-x"
    assert len(cache) == 2


def test_entity_lookup_matches_id_then_name_substring(db_session, catalog):
    lookup = EntityLookup(db_session, models.Client)

    assert lookup(catalog["acme"].id) == catalog["acme"].id
    assert lookup("acme") == catalog["acme"].id
    assert lookup("BETA") == catalog["beta"].id
    assert lookup("Gamma") is None


def test_resolver_built_for_model_uses_the_database(db_session, catalog):
    resolver = IdentityResolver.for_model(db_session, models.Product, LookupCache())

    assert resolver.resolve("rastreador") == catalog["tracker"].id
    assert resolver.resolve(catalog["camera"].id) == catalog["camera"].id


def test_entity_lookup_folds_accented_capitals(db_session, catalog):
    aguia = models.Client(name="Águia Transportes")
    db_session.add(aguia)
    db_session.commit()
    lookup = EntityLookup(db_session, models.Client)

    assert lookup("Águia Transportes") == aguia.id
    assert lookup("águia") == aguia.id
    assert lookup("ÁGUIA TRANSPORTES") == aguia.id


@pytest.mark.parametrize("value", ["%", "_", "%%", "Acme%", "_cme"])
def test_entity_lookup_treats_wildcards_literally(db_session, catalog, value):
    lookup = EntityLookup(db_session, models.Client)

    assert lookup(value) is None


def test_bulk_import_resolves_accented_client_name(client, db_session, catalog):
    db_session.add(models.Client(name="Ômega Frotas"))
    db_session.commit()

    response = client.post(
        "/schedules/bulk",
        json={
            "schedules": [
                {"vin": "9BW0042", "model": "FH", "serviceType": "manutenção", "client": "Ômega Frotas"}
            ]
        },
    )

    assert response.status_code == 201, response.text
