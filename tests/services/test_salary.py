from models.category import CategoryType
from models.seed import StaffRole
from services.salary import SalarySeeder, role_label, role_name


class TestRoleLabel:
    """Tests for role label helpers."""

    def test_label_combines_title_and_name(self):
        assert role_label("Chief Executive Officer", "CEO") == "Chief Executive Officer - CEO"

    def test_blank_name_uses_placeholder(self):
        assert role_label("Engineer", "   ") == "Engineer - Unnamed"
        assert role_label("Engineer", None) == "Engineer - Unnamed"

    def test_title_and_name_are_stripped(self):
        assert role_label("  Engineer ", " Sam ") == "Engineer - Sam"

    def test_name_sources_in_order(self):
        both = StaffRole(title="CEO", filledByEn="Jane", filledByAr="جين")
        arabic = StaffRole(title="CEO", filledByAr="جين")
        none = StaffRole(title="CEO")

        assert role_name(both) == "Jane"
        assert role_name(arabic) == "جين"
        assert role_name(none) == "Unnamed"
        assert role_name(none, placeholder="غير محدد") == "غير محدد"

    def test_empty_first_source_does_not_fall_through(self):
        role = StaffRole(title="CEO", filledByEn="", filledByAr="جين")

        assert role_label(role.title, role_name(role)) == "CEO - Unnamed"


class TestSalarySeeder:
    """Tests for SalarySeeder."""

    def test_creates_parent_and_children(self, services, store):
        roles = [
            StaffRole(title="Chief Executive Officer", filledByEn="CEO"),
            StaffRole(title="Engineer", filledByEn="Sam"),
        ]

        result = services.salary_seeder.seed(roles)

        parent = services.categories.find(result.parent_id)
        assert parent.label == "Salary"
        assert parent.type == CategoryType.EXPENSE
        assert parent.parent_id is None
        assert result.created == 2
        assert services.categories.child_labels(parent.id, CategoryType.EXPENSE) == {
            "Chief Executive Officer - CEO",
            "Engineer - Sam",
        }

    def test_identical_labels_produce_one_child(self, services, store):
        """Two unnamed engineers become a single 'Engineer - Unnamed' child."""
        roles = [StaffRole(title="Engineer"), StaffRole(title="Engineer")]

        result = services.salary_seeder.seed(roles)

        assert result.created == 1
        children = [
            d for d in store.find("Category") if d.get("parentId") == result.parent_id
        ]
        assert [d["label"] for d in children] == ["Engineer - Unnamed"]

    def test_rerun_skips_existing(self, services, store):
        roles = [StaffRole(title="Engineer", filledByEn="Sam")]

        first = services.salary_seeder.seed(roles)
        second = services.salary_seeder.seed(roles)

        assert first.created == 1
        assert second.created == 0
        assert second.skipped == 1
        assert second.parent_id == first.parent_id
        assert len(store.find("Category")) == 2

    def test_merges_with_existing_parent_without_parent_field(self, services, store):
        salary_id = store.insert("Category", {"label": "Salary", "type": "EXPENSE"})

        result = services.salary_seeder.seed([StaffRole(title="Engineer")])

        assert result.parent_id == salary_id
        assert len(store.find("Category")) == 2

    def test_new_roles_merged_into_existing_children(self, services):
        services.salary_seeder.seed([StaffRole(title="Engineer", filledByEn="Sam")])

        result = services.salary_seeder.seed(
            [
                StaffRole(title="Engineer", filledByEn="Sam"),
                StaffRole(title="Designer", filledByEn="Ana"),
            ]
        )

        assert result.created == 1
        assert result.skipped == 1

    def test_revenue_salary_is_not_reused(self, services):
        revenue = services.categories.create("Salary", CategoryType.REVENUE)

        result = services.salary_seeder.seed([])

        assert result.parent_id != revenue.id

    def test_custom_placeholder(self, services):
        seeder = SalarySeeder(services.categories, placeholder="TBD")

        assert seeder.desired_labels([StaffRole(title="Engineer")]) == {"Engineer - TBD"}
