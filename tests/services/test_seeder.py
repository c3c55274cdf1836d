from models.category import CategoryType
from models.seed import SeedChild, SeedPlan, SeedRoot
from tests.helpers import get_document


def infra_plan():
    return SeedPlan(
        roots=[SeedRoot(slug="infra", label="Infra", type=CategoryType.EXPENSE)],
        children=[
            SeedChild(
                slug="hosting",
                parent_slug="infra",
                label="Hosting",
                type=CategoryType.EXPENSE,
            )
        ],
    )


class TestTreeSeeder:
    """Tests for TreeSeeder."""

    def test_seed_creates_roots_and_children(self, services, store):
        result = services.tree_seeder.seed(infra_plan())

        assert result.created == 2
        assert result.skipped == 0
        assert result.errors == 0
        hosting = get_document(store, "Category", result.slug_ids["hosting"])
        assert hosting["parentId"] == result.slug_ids["infra"]
        assert hosting["label"] == "Hosting"
        assert hosting["type"] == "EXPENSE"
        assert "key" not in hosting
        assert "parentKey" not in hosting

    def test_seed_twice_creates_no_duplicates(self, services, store):
        """Seeding the same plan twice leaves exactly two categories."""
        first = services.tree_seeder.seed(infra_plan())
        second = services.tree_seeder.seed(infra_plan())

        assert len(store.find("Category")) == 2
        assert second.created == 0
        assert second.skipped == 2
        assert second.slug_ids == first.slug_ids

    def test_unknown_parent_slug_reported_and_skipped(self, services, store):
        plan = SeedPlan(
            roots=[SeedRoot(slug="infra", label="Infra")],
            children=[
                SeedChild(slug="hosting", parent_slug="infra", label="Hosting"),
                SeedChild(slug="ads", parent_slug="marketing", label="Ads"),
            ],
        )

        result = services.tree_seeder.seed(plan)

        assert result.created == 2
        assert result.errors == 1
        assert "ads" not in result.slug_ids
        labels = {d["label"] for d in store.find("Category")}
        assert labels == {"Infra", "Hosting"}

    def test_child_cannot_use_another_child_as_parent(self, services, store):
        """A parentSlug naming a child is a configuration error, not a third level."""
        plan = SeedPlan(
            roots=[SeedRoot(slug="infra", label="Infra")],
            children=[
                SeedChild(slug="hosting", parent_slug="infra", label="Hosting"),
                SeedChild(slug="vps", parent_slug="hosting", label="VPS"),
            ],
        )

        result = services.tree_seeder.seed(plan)

        assert result.created == 2
        assert result.errors == 1
        assert "vps" not in result.slug_ids
        assert "hosting" in result.slug_ids
        labels = {d["label"] for d in store.find("Category")}
        assert labels == {"Infra", "Hosting"}

    def test_children_declared_before_roots_still_resolve(self, services):
        plan = SeedPlan.model_validate(
            {
                "children": [
                    {"slug": "hosting", "parentSlug": "infra", "label": "Hosting"}
                ],
                "roots": [{"slug": "infra", "label": "Infra"}],
            }
        )

        result = services.tree_seeder.seed(plan)

        assert result.errors == 0
        assert result.created == 2

    def test_existing_root_reused(self, services):
        existing = services.categories.create("Infra", CategoryType.EXPENSE)

        result = services.tree_seeder.seed(infra_plan())

        assert result.slug_ids["infra"] == existing.id
        assert result.skipped == 1
        assert result.created == 1

    def test_same_label_different_type_is_a_different_node(self, services):
        services.categories.create("Infra", CategoryType.REVENUE)

        result = services.tree_seeder.seed(infra_plan())

        assert result.created == 2

    def test_same_label_under_different_parents(self, services, store):
        plan = SeedPlan(
            roots=[
                SeedRoot(slug="infra", label="Infra"),
                SeedRoot(slug="marketing", label="Marketing"),
            ],
            children=[
                SeedChild(slug="infra-tools", parent_slug="infra", label="Tools"),
                SeedChild(slug="marketing-tools", parent_slug="marketing", label="Tools"),
            ],
        )

        result = services.tree_seeder.seed(plan)

        assert result.created == 4
        assert result.slug_ids["infra-tools"] != result.slug_ids["marketing-tools"]

    def test_order_is_stored(self, services, store):
        plan = SeedPlan(roots=[SeedRoot(slug="ops", label="Ops", order=5)])

        result = services.tree_seeder.seed(plan)

        assert get_document(store, "Category", result.slug_ids["ops"])["order"] == 5

    def test_bundled_seed_plan_is_idempotent(self, services, store, test_config):
        from models.seed import load_seed_plan

        plan = load_seed_plan(test_config.seed_dir / "categories.yaml")

        first = services.tree_seeder.seed(plan)
        total = len(store.find("Category"))
        second = services.tree_seeder.seed(plan)

        assert first.errors == 0
        assert first.created == len(plan.roots) + len(plan.children)
        assert total == first.created
        assert second.created == 0
        assert len(store.find("Category")) == total
