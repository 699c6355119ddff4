from review_guesser.catalog import CatalogLoader
from review_guesser.selection import SelectionPolicy, pick_random_item

SHARDS = ["data/Batch_1.csv", "data/Batch_2.csv", "data/Batch_3.csv"]


def test_pick_random_item_uses_floor_of_scaled_value():
    items = ["a", "b", "c", "d"]
    assert pick_random_item(items, lambda: 0.0) == "a"
    assert pick_random_item(items, lambda: 0.49) == "b"
    assert pick_random_item(items, lambda: 0.999) == "d"


def test_pick_random_item_clamps_out_of_range_source():
    assert pick_random_item(["a", "b"], lambda: 1.0) == "b"


def test_pick_random_item_empty():
    assert pick_random_item([], lambda: 0.5) is None
    assert pick_random_item((), lambda: 0.5) is None


def test_raw_mode_samples_released_catalog(loader):
    policy = SelectionPolicy(loader, shard_sources=SHARDS, rng=lambda: 0.5)
    assert policy.pick_target("raw").id == 570
    assert "data/Batch_1.csv" not in loader.cache


def test_balanced_mode_samples_chosen_shard(loader, make_rng):
    # 0.0 -> Batch_1, then 0.9 -> second record of Batch_1
    policy = SelectionPolicy(loader, shard_sources=SHARDS, rng=make_rng(0.0, 0.9))
    assert policy.pick_target("balanced").id == 1245620


def test_balanced_mode_falls_back_to_released_when_shard_empty(loader, make_rng):
    # 0.9 -> Batch_3 (header only), then 0.0 -> first released record
    policy = SelectionPolicy(loader, shard_sources=SHARDS, rng=make_rng(0.9, 0.0))
    assert policy.pick_target("balanced").id == 440


def test_balanced_mode_falls_back_when_shard_missing(loader, make_rng):
    policy = SelectionPolicy(loader, shard_sources=["data/nope.csv"], rng=make_rng(0.0, 0.99))
    assert policy.pick_target("balanced").id == 730


def test_balanced_mode_without_shards_uses_released(loader):
    policy = SelectionPolicy(loader, shard_sources=[], rng=lambda: 0.0)
    assert policy.pick_target("balanced").id == 440


def test_unknown_mode_is_treated_as_balanced(loader, make_rng):
    policy = SelectionPolicy(loader, shard_sources=SHARDS, rng=make_rng(0.5, 0.0))
    assert policy.pick_target("bogus").id == 292030


def test_no_target_when_every_pool_is_empty(tmp_path):
    loader = CatalogLoader(data_dir=str(tmp_path))
    policy = SelectionPolicy(loader, shard_sources=SHARDS, rng=lambda: 0.0)
    assert policy.pick_target("balanced") is None
    assert policy.pick_target("raw") is None


def test_released_ids(loader):
    policy = SelectionPolicy(loader)
    assert policy.released_ids() == [440, 570, 730]


def test_default_shards_are_the_six_batches(loader):
    policy = SelectionPolicy(loader)
    assert policy.shard_sources == [f"data/Batch_{i}.csv" for i in range(1, 7)]
