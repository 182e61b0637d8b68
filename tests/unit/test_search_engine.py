import time
from pathlib import Path

from javadoc_mcp.indexer import IndexBuilder, SearchEngine, load_snapshot
from javadoc_mcp.schemas import (
    ClassDocumentation,
    EntityKind,
    IndexSnapshot,
    MethodSearchEntry,
    PackageDocumentation,
    SearchSettings,
)


def test_widget_render_lookup(tmp_path: Path, inventory_writer) -> None:
    inventory_writer(
        tmp_path,
        [{"p": "com.x.y", "l": "Widget"}],
        [{"p": "com.x.y", "c": "Widget", "l": "render(Path)"}],
        [{"l": "com.x.y"}],
    )
    engine = SearchEngine(IndexBuilder(tmp_path).build())

    classes = engine.search_classes("Widget")
    methods = engine.search_methods("render")

    assert [c.fully_qualified_name for c in classes] == ["com.x.y.Widget"]
    assert [m.class_name for m in methods] == ["com.x.y.Widget"]
    assert methods[0].signature == "render(Path)"


def test_task_category_lookup() -> None:
    checker = ClassDocumentation(
        fully_qualified_name="com.x.Checker",
        simple_name="Checker",
        package="com.x",
        html_path="com/x/Checker.html",
    )
    snapshot = IndexSnapshot(
        classes={"com.x.Checker": checker, "Checker": checker},
        packages={"com.x": PackageDocumentation(name="com.x", classes=["com.x.Checker"])},
        categories_by_task={"validation": ["com.x.Checker"]},
    )

    results = SearchEngine(snapshot).find_packages_by_task("validation")

    assert len(results) == 1
    assert results[0].name == "com.x"
    assert results[0].key_classes == ["com.x.Checker"]
    assert results[0].relevance_score == 1.0


def test_get_class_by_fqn_and_simple_name(snapshot) -> None:
    engine = SearchEngine(snapshot)

    assert engine.get_class("com.acme.ui.Widget").simple_name == "Widget"
    assert engine.get_class("Checker").fully_qualified_name == "com.acme.validation.Checker"
    assert engine.get_class("Nope") is None


def test_search_classes_ranks_exact_name_first(snapshot) -> None:
    results = SearchEngine(snapshot).search_classes("Widget")

    assert results[0].fully_qualified_name == "com.acme.ui.Widget"
    assert results[0].kind == EntityKind.CLASS
    assert results[0].key_methods == ["render", "resize"]
    assert 0.99 < results[0].relevance_score <= 1.0


def test_search_classes_respects_limit(snapshot) -> None:
    engine = SearchEngine(snapshot)

    assert len(engine.search_classes("acme")) == 4
    assert len(engine.search_classes("acme", limit=2)) == 2


def test_search_classes_filters(snapshot) -> None:
    engine = SearchEngine(snapshot)

    by_package = engine.search_classes("acme", package="com.acme.validation")
    by_kind = engine.search_classes("acme", kind=EntityKind.EXCEPTION)

    assert {r.name for r in by_package} == {"Checker", "ValidationException"}
    assert all(r.package == "com.acme.validation" for r in by_package)
    assert [r.name for r in by_kind] == ["ValidationException"]


def test_aliases_are_not_searched_twice(snapshot) -> None:
    results = SearchEngine(snapshot).search_classes("acme")

    assert len({r.fully_qualified_name for r in results}) == len(results)


def test_search_methods_lists_overloads(snapshot) -> None:
    results = SearchEngine(snapshot).search_methods("render")

    assert [r.signature for r in results] == ["render()", "render(com.acme.ui.Context)"]
    assert all(r.class_name == "com.acme.ui.Widget" for r in results)


def test_search_methods_filters(snapshot) -> None:
    engine = SearchEngine(snapshot)

    assert engine.search_methods("render", class_name="WIDGET") != []
    assert engine.search_methods("render", class_name="Panel") == []
    # return types are unknown until class pages are parsed
    assert engine.search_methods("render", return_type="void") == []


def test_search_methods_no_match_is_empty(snapshot) -> None:
    assert SearchEngine(snapshot).search_methods("zzzzqqq") == []


def test_find_packages_by_task(snapshot) -> None:
    engine = SearchEngine(snapshot)

    validation = engine.find_packages_by_task("Validation")
    rendering = engine.find_packages_by_task("widget rendering")

    assert [p.name for p in validation] == ["com.acme.validation"]
    assert validation[0].key_classes == ["com.acme.validation.Checker", "com.acme.validation.ValidationException"]
    assert [p.name for p in rendering] == ["com.acme.ui"]
    assert rendering[0].key_classes == ["com.acme.ui.Widget", "com.acme.ui.Panel"]
    assert engine.find_packages_by_task("render")[0].name == "com.acme.ui"
    assert engine.find_packages_by_task("persistence") == []
    assert engine.find_packages_by_task("  ") == []


def test_find_packages_scores_by_share_of_task_classes() -> None:
    docs = {
        name: ClassDocumentation(
            fully_qualified_name=name,
            simple_name=name.rsplit(".", 1)[1],
            package=name.rsplit(".", 1)[0],
            html_path=name.replace(".", "/") + ".html",
        )
        for name in ("com.a.One", "com.a.Two", "com.a.Three", "com.b.Four")
    }
    snapshot = IndexSnapshot(
        classes=docs,
        packages={
            "com.a": PackageDocumentation(name="com.a", classes=["com.a.One", "com.a.Two", "com.a.Three"]),
            "com.b": PackageDocumentation(name="com.b", classes=["com.b.Four"]),
        },
        categories_by_task={"io": ["com.b.Four", "com.a.One", "com.a.Two", "com.a.Three"]},
    )

    results = SearchEngine(snapshot).find_packages_by_task("io")

    assert [(r.name, r.relevance_score) for r in results] == [("com.a", 0.75), ("com.b", 0.25)]


def test_search_packages(snapshot) -> None:
    results = SearchEngine(snapshot).search_packages("validation")

    assert [r.name for r in results] == ["com.acme.validation"]
    assert results[0].key_classes == ["com.acme.validation.Checker", "com.acme.validation.ValidationException"]


def test_stats(snapshot) -> None:
    stats = SearchEngine(snapshot).get_stats()

    assert stats.entity_count == 4
    assert stats.entity_count_with_aliases == 8
    assert stats.method_name_count == 6
    assert stats.method_count == 7
    assert stats.package_count == 2
    assert stats.category_count == 3


def test_settings_threshold_applies(snapshot) -> None:
    strict = SearchEngine(snapshot, SearchSettings(threshold=0.0))

    assert [r.name for r in strict.search_classes("Widget")] == ["Widget"]
    assert strict.search_classes("Widgte") == []


def test_snapshot_round_trip(tmp_path: Path, javadoc_dir: Path, snapshot) -> None:
    engine = SearchEngine(snapshot)
    path = IndexBuilder(javadoc_dir).save(engine.to_snapshot(), tmp_path / "roundtrip.json")
    reloaded = SearchEngine(load_snapshot(path))

    queries = ["Widget", "acme", "Checkr"]
    for query in queries:
        assert [r.model_dump() for r in reloaded.search_classes(query)] == [
            r.model_dump() for r in engine.search_classes(query)
        ]
    assert [r.model_dump() for r in reloaded.search_methods("render")] == [
        r.model_dump() for r in engine.search_methods("render")
    ]
    assert [r.model_dump() for r in reloaded.find_packages_by_task("validation")] == [
        r.model_dump() for r in engine.find_packages_by_task("validation")
    ]
    assert reloaded.get_stats() == engine.get_stats()


def test_method_search_over_thousands_of_entries() -> None:
    methods = {}
    for i in range(6000):
        name = f"getTable{i}" if i % 500 == 0 else f"setWidth{i}"
        package = f"com.acme.module{i % 50}"
        methods.setdefault(name, []).append(MethodSearchEntry(
            method=name,
            signature=f"{name}(int)",
            class_name=f"{package}.Component{i}",
            package_name=package,
        ))
    engine = SearchEngine(IndexSnapshot(methods=methods))

    started = time.perf_counter()
    results = engine.search_methods("getTable", limit=5)
    elapsed = time.perf_counter() - started

    assert len(results) == 5
    assert all(result.method.startswith("getTable") for result in results)
    assert elapsed < 2.0
