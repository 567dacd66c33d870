"""
Unit Tests for the dashboard facade
Tests for: caching, role filtering, widgets, configuration, export, cache management
"""
import json
import pytest

from app.core.exceptions import ExportNotImplementedError, UnknownWidgetError, ValidationError
from app.schemas.dashboard import DashboardConfigUpdate, DashboardQuery
from app.services.cache_service import TTLCache
from app.services.dashboard_service import (
    DashboardService,
    default_dashboard_config,
    filter_dashboard_by_role,
    flatten_for_csv,
    query_fingerprint,
    to_csv,
)


@pytest.fixture
async def overview(metrics_service):
    return await metrics_service.get_dashboard_overview()


class TestOverviewCaching:

    @pytest.mark.asyncio
    async def test_second_call_is_served_from_cache(self, dashboard_service: DashboardService, fake_source):
        first = await dashboard_service.get_dashboard_overview(DashboardQuery())
        second = await dashboard_service.get_dashboard_overview(DashboardQuery())

        assert first is second
        assert fake_source.calls['count_users'] == 1

    @pytest.mark.asyncio
    async def test_overview_recomputed_after_ttl(self, dashboard_service: DashboardService, fake_source, clock):
        await dashboard_service.get_dashboard_overview()
        clock.advance(121)
        await dashboard_service.get_dashboard_overview()

        assert fake_source.calls['count_users'] == 2

    @pytest.mark.asyncio
    async def test_different_queries_use_different_keys(self, dashboard_service: DashboardService, cache: TTLCache):
        await dashboard_service.get_dashboard_overview(DashboardQuery(limit=3))
        await dashboard_service.get_dashboard_overview(DashboardQuery(limit=4))

        assert len(cache.get_keys_by_category('dashboard')) == 2

    def test_query_fingerprint_is_stable(self):
        assert query_fingerprint(None) == query_fingerprint(DashboardQuery())
        assert query_fingerprint(DashboardQuery(limit=3)) != query_fingerprint(DashboardQuery(limit=4))
        assert len(query_fingerprint(DashboardQuery())) == 64

    @pytest.mark.asyncio
    async def test_role_based_dashboard_filters_cached_overview(self, dashboard_service: DashboardService):
        editor_view = await dashboard_service.get_role_based_dashboard('editor')
        full = await dashboard_service.get_dashboard_overview()

        assert editor_view.hr.total_employees == 0
        assert full.hr.total_employees == 68


class TestRoleFilter:

    @pytest.mark.asyncio
    async def test_admin_sees_everything(self, overview):
        assert filter_dashboard_by_role(overview, 'ADMIN') is overview

    @pytest.mark.asyncio
    async def test_manager_gets_limited_health_message(self, overview):
        view = filter_dashboard_by_role(overview, 'manager')

        assert view.system.system_health.message == 'System health information limited for managers'
        assert view.system.system_health.status == overview.system.system_health.status
        assert view.hr == overview.hr

    @pytest.mark.asyncio
    async def test_editor_view(self, overview):
        view = filter_dashboard_by_role(overview, 'Editor')

        assert view.hr.total_employees == 0
        assert view.hr.departments == []
        assert view.system.total_departments == 0
        assert view.system.total_users == overview.system.total_users
        assert view.system.storage.used == 'Limited'
        assert view.system.system_health.status == 'unknown'
        assert view.system.system_health.last_checked == overview.generated_at
        assert view.content == overview.content

    @pytest.mark.asyncio
    async def test_filter_does_not_modify_input(self, overview):
        filter_dashboard_by_role(overview, 'editor')
        filter_dashboard_by_role(overview, 'user')

        assert overview.hr.total_employees == 68
        assert overview.system.storage.used == '45.2 GB'
        assert len(overview.users.top_active_users) == 2

    @pytest.mark.asyncio
    async def test_filter_is_deterministic(self, overview):
        assert filter_dashboard_by_role(overview, 'editor') == filter_dashboard_by_role(overview, 'editor')
        assert filter_dashboard_by_role(overview, 'guest') == filter_dashboard_by_role(overview, 'guest')

    @pytest.mark.asyncio
    async def test_user_view(self, overview):
        view = filter_dashboard_by_role(overview, 'user')

        assert view.system.storage.used == 'Not available'
        assert view.users.role_distribution.model_dump() == {'admin': 0, 'editor': 0, 'user': 30, 'manager': 0}
        assert view.users.top_active_users == []
        assert view.users.daily_active_users == overview.users.daily_active_users
        assert view.hr.total_employees == 0

    @pytest.mark.asyncio
    async def test_unknown_role_is_denied(self, overview):
        view = filter_dashboard_by_role(overview, 'guest')

        assert view.system.total_users == 0
        assert view.system.system_health.message == 'Access denied for unknown role'
        assert view.content.top_documents == []
        assert view.users.role_distribution.user == 0
        assert view.marketing.total_banner_views == 0
        assert view.generated_at == overview.generated_at


class TestCsv:

    def test_nested_mapping_and_lists(self):
        assert to_csv({'a': {'b': 1}, 'c': [1, 2]}) == 'a.b,c[0],c[1]\n1,1,2'

    def test_values_with_commas_and_quotes_are_quoted(self):
        assert to_csv({'title': 'Notice, "urgent"'}) == 'title\n"Notice, ""urgent"""'

    def test_newline_is_quoted(self):
        assert to_csv({'note': 'line1\nline2'}) == 'note\n"line1\nline2"'

    def test_none_and_list_of_objects(self, fixed_now):
        flattened = flatten_for_csv({
            'missing': None,
            'items': [{'id': 'x', 'at': fixed_now}],
            'flag': True,
        })

        assert flattened == {
            'missing': '',
            'items[0].id': 'x',
            'items[0].at': '2024-05-01T12:00:00',
            'flag': 'true',
        }

    @pytest.mark.asyncio
    async def test_overview_flattens(self, overview):
        flattened = flatten_for_csv(overview)

        assert flattened['system.total_users'] == '42'
        assert flattened['content.top_documents[0].title'] == 'Annual Report'
        assert flattened['placeholder_metrics[0]'] == 'system.storage'


class TestWidgets:

    @pytest.mark.asyncio
    async def test_unknown_widget_raises(self, dashboard_service: DashboardService):
        with pytest.raises(UnknownWidgetError, match='Unknown widget: revenue'):
            await dashboard_service.get_widget_data('revenue')

    @pytest.mark.asyncio
    async def test_unknown_widget_lists_known_ids(self, dashboard_service: DashboardService):
        with pytest.raises(UnknownWidgetError) as exc_info:
            await dashboard_service.get_widget_data('revenue')

        assert 'hr-analytics' in exc_info.value.details['known_widgets']
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize('widget_id,field', [
        ('system-overview', 'total_users'),
        ('content-analytics', 'top_documents'),
        ('user-analytics', 'role_distribution'),
        ('hr-analytics', 'total_employees'),
        ('marketing-analytics', 'top_sliders'),
    ])
    async def test_known_widgets(self, dashboard_service: DashboardService, widget_id, field):
        data = await dashboard_service.get_widget_data(widget_id)

        assert hasattr(data, field)

    @pytest.mark.asyncio
    async def test_widget_data_is_cached_for_a_minute(self, dashboard_service: DashboardService, fake_source, clock):
        await dashboard_service.get_widget_data('hr-analytics')
        await dashboard_service.get_widget_data('hr-analytics')
        assert fake_source.calls['count_employees'] == 1

        clock.advance(61)
        await dashboard_service.get_widget_data('hr-analytics')
        assert fake_source.calls['count_employees'] == 2


class TestConfiguration:

    def test_default_configs(self):
        admin = default_dashboard_config('admin')
        editor = default_dashboard_config('editor')
        other = default_dashboard_config('auditor')

        assert [w.id for w in admin.widgets] == [
            'system-overview', 'content-analytics', 'user-analytics', 'hr-analytics', 'marketing-analytics',
        ]
        assert admin.layout == 'grid'
        assert admin.refresh_interval == 30000
        assert editor.layout == 'list'
        assert editor.auto_refresh is False
        assert other.id == 'default-dashboard'
        assert other.role == 'unknown'

    @pytest.mark.asyncio
    async def test_config_is_cached_per_role(self, dashboard_service: DashboardService, cache: TTLCache):
        config = await dashboard_service.get_dashboard_config('Manager')

        assert config.id == 'manager-dashboard'
        assert cache.has('dashboard:config:manager')

    @pytest.mark.asyncio
    async def test_update_merges_partial(self, dashboard_service: DashboardService):
        updated = await dashboard_service.update_dashboard_config(
            'admin', DashboardConfigUpdate(layout='list', refresh_interval=120000)
        )
        fetched = await dashboard_service.get_dashboard_config('admin')

        assert updated.layout == 'list'
        assert updated.refresh_interval == 120000
        assert len(updated.widgets) == 5
        assert updated.name == 'Admin Dashboard'
        assert fetched == updated


class TestExport:

    @pytest.mark.asyncio
    async def test_json_export(self, dashboard_service: DashboardService):
        body, export = await dashboard_service.export_dashboard(DashboardQuery(), 'json', 'user-1')

        data = json.loads(body)
        assert data['system']['total_users'] == 42
        assert export.filename == 'dashboard-export-2024-05-01.json'
        assert export.content_type == 'application/json'
        assert export.size == len(body)
        assert export.exported_by == 'user-1'

    @pytest.mark.asyncio
    async def test_csv_export(self, dashboard_service: DashboardService):
        body, export = await dashboard_service.export_dashboard(DashboardQuery(), 'csv', 'user-1')

        header, row = body.decode('utf-8').split('\n', 1)
        assert header.startswith('system.total_users,system.active_users')
        assert export.content_type == 'text/csv'
        assert export.filename.endswith('.csv')

    @pytest.mark.asyncio
    async def test_export_metadata_is_cached(self, dashboard_service: DashboardService, cache: TTLCache):
        await dashboard_service.export_dashboard(DashboardQuery(), 'json', 'user-1')

        keys = cache.get_keys_by_category('dashboard')
        assert any(key.startswith('dashboard:exports:user-1:') for key in keys)

    @pytest.mark.asyncio
    async def test_export_bypasses_cached_overview(self, dashboard_service: DashboardService, fake_source):
        await dashboard_service.get_dashboard_overview(DashboardQuery())
        fake_source.counts['users'] = 99

        body, _ = await dashboard_service.export_dashboard(DashboardQuery(), 'json', 'user-1')

        assert json.loads(body)['system']['total_users'] == 99
        cached = await dashboard_service.get_dashboard_overview(DashboardQuery())
        assert cached.system.total_users == 42

    @pytest.mark.asyncio
    async def test_pdf_not_implemented(self, dashboard_service: DashboardService):
        with pytest.raises(ExportNotImplementedError) as exc_info:
            await dashboard_service.export_dashboard(DashboardQuery(), 'pdf')

        assert exc_info.value.status_code == 501

    @pytest.mark.asyncio
    async def test_unknown_format_rejected(self, dashboard_service: DashboardService):
        with pytest.raises(ValidationError):
            await dashboard_service.export_dashboard(DashboardQuery(), 'xml')


class TestCacheManagement:

    @pytest.mark.asyncio
    async def test_clear_category(self, dashboard_service: DashboardService, cache: TTLCache):
        await dashboard_service.get_dashboard_overview()
        await dashboard_service.get_dashboard_config('admin')
        cache.set('other:key', 1)

        result = dashboard_service.clear_cache('dashboard')

        assert result.cleared == 2
        assert cache.has('other:key')

    def test_clear_everything(self, dashboard_service: DashboardService, cache: TTLCache):
        cache.set('other:key', 1)

        result = dashboard_service.clear_cache()

        assert result.cleared == -1
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_refresh_recomputes(self, dashboard_service: DashboardService, fake_source):
        await dashboard_service.get_dashboard_overview()
        await dashboard_service.refresh_dashboard()

        assert fake_source.calls['count_users'] == 2

    @pytest.mark.asyncio
    async def test_cache_stats(self, dashboard_service: DashboardService):
        await dashboard_service.get_dashboard_overview()
        await dashboard_service.get_dashboard_overview()

        stats = dashboard_service.get_cache_stats()

        assert stats.hits == 1
        assert stats.misses == 1
        assert stats.size == 1

    def test_health_healthy(self, dashboard_service: DashboardService, fixed_now):
        health = dashboard_service.get_dashboard_health()

        assert health.status == 'healthy'
        assert health.cache_health is True
        assert health.last_updated == fixed_now

    def test_health_degraded_when_cache_nearly_full(self, metrics_service, clock):
        small_cache = TTLCache(default_ttl=300, max_size=2, clock=clock)
        small_cache.set('a', 1)
        small_cache.set('b', 2)
        service = DashboardService(metrics_service, small_cache)

        health = service.get_dashboard_health()

        assert health.status == 'degraded'
        assert health.cache_health is False
