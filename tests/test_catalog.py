import pytest

from backend.catalog import CatalogError, ExerciseCatalog, load_catalog
from backend.equipment import recognized_keywords
from backend.models import Category, EquipmentTier
from conftest import make_exercise

HEADER = "id,name,description,category,equipment,difficulty,duration,sets,reps,muscle_groups\n"


def test_default_catalog_loads(catalog):
    assert len(catalog) > 50
    ids = [e.id for e in catalog]
    assert len(ids) == len(set(ids))
    assert {e.category for e in catalog} == set(Category)


def test_default_catalog_has_bodyweight_stretches(catalog):
    flex = catalog.by_category(Category.FLEXIBILITY)
    assert len(flex) >= 4
    assert all(e.equipment == EquipmentTier.NONE for e in flex)


def test_every_basic_catalog_exercise_names_its_equipment(catalog):
    basic = [e for e in catalog if e.equipment == EquipmentTier.BASIC]
    assert basic
    for e in basic:
        assert recognized_keywords(e), e.id


def test_rows_are_parsed(catalog):
    plank = catalog.get("core-plank")
    assert plank is not None
    assert plank.duration == 180
    assert plank.sets is None
    assert plank.muscle_groups == ("core", "shoulders")
    push = catalog.get("chest-push-ups")
    assert (push.sets, push.reps) == (3, 12)


def test_load_catalog_is_cached():
    assert load_catalog() is load_catalog()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        ExerciseCatalog.from_csv(str(tmp_path / "nope.csv"))


def test_custom_csv(tmp_path):
    path = tmp_path / "mini.csv"
    path.write_text(HEADER + "a,Squat,,legs,none,beginner,,3,10,quads; glutes\n")
    cat = ExerciseCatalog.from_csv(str(path))
    (e,) = cat.exercises
    assert e.duration is None
    assert e.muscle_groups == ("quads", "glutes")


def test_bad_category_is_reported(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text(HEADER + "a,Thing,,wings,none,beginner,60,,,chest\n")
    with pytest.raises(CatalogError, match="row 2"):
        ExerciseCatalog.from_csv(str(path))


def test_missing_columns(tmp_path):
    path = tmp_path / "cols.csv"
    path.write_text("id,name\na,Squat\n")
    with pytest.raises(CatalogError, match="missing columns"):
        ExerciseCatalog.from_csv(str(path))


def test_entry_needs_duration_or_reps():
    with pytest.raises(CatalogError):
        ExerciseCatalog([make_exercise("a", duration=None)])


def test_duplicate_ids_rejected():
    with pytest.raises(CatalogError):
        ExerciseCatalog([make_exercise("a"), make_exercise("a")])
