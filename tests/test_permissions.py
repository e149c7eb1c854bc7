from wdlperm.permissions import Permissions
from wdlperm.protocol import fields
from wdlperm.protocol.message import Rectangle


def general(permissions, download=True, radius=-1, cache=True, entities=True, tile_entities=True, containers=True):
    """ Mimic the arrival of a kind 1 message.
    """

    permissions.mark_received(fields.GENERAL_PERMISSIONS)
    permissions.download_in_general = download
    permissions.save_radius = radius
    permissions.cache_chunks = cache
    permissions.save_entities = entities
    permissions.save_tile_entities = tile_entities
    permissions.save_containers = containers


def test_defaults_are_permissive():

    permissions = Permissions()

    assert permissions.can_use_unknown_functions()
    assert permissions.can_download_in_general()
    assert permissions.can_download_at_all()
    assert permissions.can_save_chunk(0, 0)
    assert permissions.can_save_entities()
    assert permissions.can_save_tile_entities()
    assert permissions.can_save_containers()
    assert permissions.can_save_maps()

    assert not permissions.has_permissions()
    assert not permissions.has_overrides()
    assert not permissions.allows_permission_requests()
    assert permissions.request_message() is None
    assert permissions.entity_range('Cow') == -1
    assert permissions.save_radius == -1


def test_fallback_follows_unknown_functions():
    """ Before kind 1 arrives, its queries follow the current unknown-functions
        value rather than kind 1's own defaults.
    """

    permissions = Permissions()
    permissions.mark_received(fields.UNKNOWN_FUNCTIONS)
    permissions.unknown_functions = False

    assert not permissions.can_use_unknown_functions()
    assert not permissions.can_download_in_general()
    assert not permissions.can_save_chunk(3, 3)
    assert not permissions.can_save_entities()
    assert not permissions.can_save_tile_entities()
    assert not permissions.can_save_containers()
    assert not permissions.can_save_maps()

    # Kind 1 is authoritative once received, regardless of kind 0.
    general(permissions)

    assert permissions.can_download_in_general()
    assert permissions.can_save_entities()
    assert permissions.can_save_containers()


def test_unknown_functions_ignored_until_received():

    permissions = Permissions()
    permissions.unknown_functions = False

    assert permissions.can_use_unknown_functions()
    assert permissions.can_download_in_general()


def test_general_disabled():

    permissions = Permissions()
    general(permissions, download=False)

    assert not permissions.can_download_in_general()
    assert not permissions.can_download_at_all()
    assert not permissions.can_save_chunk(0, 0)
    assert not permissions.can_save_entities()
    assert not permissions.can_save_tile_entities()
    assert not permissions.can_save_containers()
    assert not permissions.can_save_maps()


def test_individual_flags():

    permissions = Permissions()
    general(permissions, entities=False, containers=False)

    assert not permissions.can_save_entities()
    assert permissions.can_save_tile_entities()
    assert not permissions.can_save_containers()

    general(permissions, tile_entities=False)

    assert permissions.can_save_entities()
    assert not permissions.can_save_tile_entities()
    assert not permissions.can_save_maps()

    # Containers need tile entities too, even with their own flag set.
    assert permissions.save_containers
    assert not permissions.can_save_containers()


def test_save_radius():

    permissions = Permissions()
    general(permissions, radius=2, cache=False)

    assert permissions.can_save_chunk(10, 10, player_x=10, player_z=10)
    assert permissions.can_save_chunk(12, 8, player_x=10, player_z=10)
    assert not permissions.can_save_chunk(13, 10, player_x=10, player_z=10)
    assert not permissions.can_save_chunk(10, 7, player_x=10, player_z=10)

    # Without a player position the radius cannot be applied.
    assert permissions.can_save_chunk(100, 100)

    # Radius only applies when caching is disabled.
    general(permissions, radius=2, cache=True)
    assert permissions.can_save_chunk(13, 10, player_x=10, player_z=10)
    assert permissions.can_cache_chunks()


def test_override_grants_everything():

    permissions = Permissions()
    general(permissions, download=False, entities=False, tile_entities=False, containers=False)

    permissions.mark_received(fields.OVERRIDE_SYNC)
    permissions.overrides.replace_all({'g': [Rectangle('x', 0, 0, 10, 10)]})

    assert permissions.is_overridden(5, 5)
    assert permissions.can_save_chunk(5, 5)
    assert permissions.can_save_entities(5, 5)
    assert permissions.can_save_tile_entities(5, 5)
    assert permissions.can_save_containers(5, 5)

    assert not permissions.can_save_chunk(11, 5)
    assert not permissions.can_save_entities(11, 5)
    assert not permissions.can_save_entities()

    assert permissions.has_overrides()
    assert permissions.can_download_at_all()
    assert not permissions.can_download_in_general()


def test_override_beats_radius():

    permissions = Permissions()
    general(permissions, radius=0, cache=False)
    permissions.overrides.update_group('g', False, [Rectangle('far', 50, 50, 60, 60)])

    assert permissions.can_save_chunk(55, 55, player_x=0, player_z=0)
    assert not permissions.can_save_chunk(1, 0, player_x=0, player_z=0)


def test_overrides_need_sync():

    permissions = Permissions()
    permissions.overrides.update_group('g', False, [Rectangle('t', 0, 0, 1, 1)])

    assert permissions.is_overridden(0, 0)
    assert not permissions.has_overrides()

    permissions.mark_received(fields.OVERRIDE_SYNC)
    assert permissions.has_overrides()

    permissions.overrides.remove_tags('g', ['t'])
    assert not permissions.has_overrides()


def test_entity_ranges():

    permissions = Permissions()
    permissions.entity_range_table = {'Cow': 80}

    # Not received yet.
    assert permissions.entity_range('Cow') == -1
    assert not permissions.has_server_entity_range()

    permissions.mark_received(fields.ENTITY_RANGES)

    assert permissions.entity_range('Cow') == 80
    assert permissions.entity_range('Pig') == -1
    assert permissions.has_server_entity_range()
    assert permissions.entity_ranges() == {'Cow': 80}

    general(permissions, entities=False)
    assert permissions.entity_range('Cow') == -1

    permissions.overrides.update_group('g', True, [Rectangle('t', 0, 0, 0, 0)])
    assert permissions.entity_range('Cow', 0, 0) == 80
    assert permissions.entity_range('Cow', 1, 1) == -1


def test_request_settings():

    permissions = Permissions()
    permissions.request_permissions = True
    permissions.request_text = 'ask nicely'

    assert not permissions.allows_permission_requests()
    assert permissions.request_message() is None

    permissions.mark_received(fields.REQUEST_PERMISSIONS)

    assert permissions.allows_permission_requests()
    assert permissions.request_message() == 'ask nicely'
    assert permissions.has_permissions()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
