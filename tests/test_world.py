"""Tests for the Session frame loop, lifecycle and level transitions"""

import pytest

from neon_arena.entities import Enemy, Particle, Projectile
from neon_arena.hud import Panel


def park_enemy(session, x=100, y=100, hp=30, speed=0.0):
    """Stationary enemy away from the centred player"""
    enemy = Enemy(x=x, y=y, speed=speed, hp=hp)
    session.enemies.append(enemy)
    return enemy


def still_shot(x, y, damage=10):
    return Projectile(x=x, y=y, vx=0, vy=0, damage=damage)


def assert_spawner_invariant(session):
    expected = session.is_running and not session.level_transitioning
    assert session.spawner_active == expected


class TestLifecycle:
    def test_start(self, session):
        assert session.hud.is_visible(Panel.START)
        session.start()
        assert session.is_running
        assert not session.hud.is_visible(Panel.START)
        assert session.spawner_interval == 2000
        assert session.level_goal == 10
        assert session.hud.enemies_left == 10
        assert_spawner_invariant(session)

    def test_update_is_noop_before_start(self, session):
        session.controls.press("d")
        x0 = session.player.x
        session.update(16)
        assert session.player.x == x0

    def test_negative_dt_rejected(self, running):
        with pytest.raises(ValueError):
            running.update(-1)

    def test_stop_shows_game_over_and_cancels_spawner(self, running):
        running.score = 700
        running.stop()
        assert not running.is_running
        assert running.game_over
        assert running.hud.is_visible(Panel.GAME_OVER)
        assert running.hud.final_score == 700
        assert not running.spawner_active

        running.scheduler.advance(10_000)
        assert running.enemies == []

    def test_restart_resets_everything(self, running):
        running.score = 1200
        running.level.current_index = 3
        running.level.begin_level()
        running.projectiles.append(still_shot(10, 10))
        park_enemy(running)
        running.particles.append(
            Particle(x=0, y=0, vx=0, vy=0, decay=0.1, size=2, color=(255, 0, 0))
        )
        running.player.hp = 5
        running.stop()

        running.restart()
        assert running.is_running
        assert not running.game_over
        assert running.score == 0
        assert running.current_level_index == 0
        assert running.enemies == [] and running.projectiles == [] and running.particles == []
        assert running.player.hp == running.player.max_hp
        assert running.spawner_interval == 2000
        assert not running.hud.is_visible(Panel.GAME_OVER)


class TestSpawner:
    def test_spawns_outside_viewport_at_level_rate(self, running):
        running.scheduler.advance(1999)
        assert running.enemies == []
        running.scheduler.advance(1)
        assert len(running.enemies) == 1

        for _ in range(20):
            running.scheduler.advance(2000)
        w, h = running.viewport.width, running.viewport.height
        for enemy in running.enemies:
            outside = enemy.x < 0 or enemy.x > w or enemy.y < 0 or enemy.y > h
            assert outside
            assert enemy.hp == 30

    def test_suppressed_while_transitioning(self, running):
        running.level.begin_transition()
        assert running.spawn_enemy() is None
        assert running.enemies == []

    def test_suppressed_when_not_running(self, session):
        assert session.spawn_enemy() is None


class TestFrame:
    def test_firing_adds_projectile(self, running, audio):
        running.controls.pointer.down = True
        running.update(16)
        assert len(running.projectiles) == 1
        assert "shoot" in audio.played

    def test_outbound_projectile_removed(self, running):
        running.projectiles.append(Projectile(x=running.viewport.width, y=10, vx=10, vy=0))
        running.update(16)
        assert running.projectiles == []

    def test_enemies_home_on_player(self, running):
        enemy = park_enemy(running, x=0, y=0, speed=3.0)
        d0 = (running.player.x - enemy.x) ** 2 + (running.player.y - enemy.y) ** 2
        running.update(16)
        d1 = (running.player.x - enemy.x) ** 2 + (running.player.y - enemy.y) ** 2
        assert d1 < d0

    def test_player_stays_in_bounds(self, running):
        running.controls.press("s")
        running.controls.press("d")
        for _ in range(300):
            running.update(16)
            p = running.player
            assert 0 <= p.x <= running.viewport.width - p.width
            assert 0 <= p.y <= running.viewport.height - p.height

    def test_particles_expire(self, running):
        running.particles.append(
            Particle(x=0, y=0, vx=0, vy=0, decay=0.6, size=2, color=(255, 0, 0))
        )
        running.update(16)
        assert len(running.particles) == 1
        running.update(16)
        assert running.particles == []

    def test_hud_published(self, running):
        running.score = 300
        running.level.enemies_defeated = 3
        running.player.hp = 40
        running.update(16)
        hud = running.hud
        assert hud.score == 300
        assert hud.level == 1
        assert hud.enemies_left == 7
        assert hud.health_percent == pytest.approx(40)


class TestCollisions:
    def test_contact_damages_player_and_destroys_enemy(self, running, audio):
        p = running.player
        park_enemy(running, x=p.x + 5, y=p.y + 5)
        running.update(16)

        assert p.hp == p.max_hp - 10
        assert running.enemies == []
        assert running.score == 0
        assert running.enemies_defeated == 0
        assert running.shake.duration > 0
        assert len(running.particles) == 25
        assert "explosion" in audio.played

    def test_lethal_contact_stops_same_frame(self, running):
        p = running.player
        p.hp = 10
        park_enemy(running, x=p.x + 5, y=p.y + 5)
        running.update(16)

        assert p.hp == 0
        assert not running.is_running
        assert running.game_over
        assert running.hud.is_visible(Panel.GAME_OVER)
        assert running.hud.health_percent == 0

    def test_projectile_kill_scores_once(self, running, audio):
        enemy = park_enemy(running, hp=10)
        running.projectiles.append(still_shot(enemy.x + 5, enemy.y + 5))
        running.update(16)

        assert running.score == 100
        assert running.enemies_defeated == 1
        assert running.enemies == []
        assert running.projectiles == []
        assert "hit" in audio.played

    def test_multiple_hits_in_one_frame(self, running):
        enemy = park_enemy(running, hp=30)
        for _ in range(2):
            running.projectiles.append(still_shot(enemy.x + 5, enemy.y + 5))
        running.update(16)

        assert enemy.hp == 10
        assert running.enemies == [enemy]
        assert running.projectiles == []
        assert running.enemies_defeated == 0

    def test_overkill_counts_one_defeat(self, running):
        enemy = park_enemy(running, hp=10)
        for _ in range(3):
            running.projectiles.append(still_shot(enemy.x + 5, enemy.y + 5))
        running.update(16)

        assert running.enemies_defeated == 1
        assert running.score == 100
        # Shots after the killing blow fly on
        assert len(running.projectiles) == 2

    def test_defeats_never_decrease(self, running):
        seen = []
        running.controls.pointer.down = True
        for frame in range(600):
            if frame % 30 == 0:
                running.scheduler.advance(2000)
            running.update(16)
            seen.append(running.enemies_defeated)
            if not running.is_running or running.level_transitioning:
                break
        assert all(v >= 0 for v in seen)
        assert all(b >= a for a, b in zip(seen, seen[1:]))


class TestLevelTransition:
    def test_goal_triggers_transition(self, running):
        running.level.enemies_defeated = running.level_goal
        running.update(16)

        assert running.level_transitioning
        assert not running.spawner_active
        assert running.hud.is_visible(Panel.LEVEL_BANNER)
        assert running.hud.banner_title == "LEVEL 2"
        assert_spawner_invariant(running)

    def test_only_one_transition_scheduled(self, running):
        running.level.enemies_defeated = running.level_goal
        for _ in range(10):
            running.update(16)
        pending = [t for t in running.scheduler.pending if t.name == "level-transition"]
        assert len(pending) == 1

    def test_transition_completes_after_delay(self, running, audio):
        running.player.hp = 50
        running.level.enemies_defeated = running.level_goal
        running.update(16)

        running.scheduler.advance(1999)
        assert running.level_transitioning
        running.scheduler.advance(1)

        assert not running.level_transitioning
        assert running.current_level_index == 1
        assert running.level_goal == 15
        assert running.enemies_defeated == 0
        assert running.player.hp == 70
        assert running.spawner_interval == 1500
        assert not running.hud.is_visible(Panel.LEVEL_BANNER)
        assert "levelup" in audio.played
        assert_spawner_invariant(running)

    def test_restart_discards_pending_transition(self, running):
        running.level.enemies_defeated = running.level_goal
        running.update(16)
        assert running.level_transitioning

        running.restart()
        running.scheduler.advance(2000)

        assert running.current_level_index == 0
        assert not running.level_transitioning
        assert running.spawner_interval == 2000

    def test_death_during_transition_cancels_it(self, running):
        running.level.enemies_defeated = running.level_goal
        running.update(16)
        running.player.hp = 0
        running.update(16)
        running.scheduler.advance(5000)

        assert running.game_over
        assert running.current_level_index == 0
        assert not running.spawner_active

    def test_heal_capped(self, running):
        running.level.enemies_defeated = running.level_goal
        running.update(16)
        running.scheduler.advance(2000)
        assert running.player.hp == running.player.max_hp


class TestDraw:
    def test_layer_order(self, running, surface):
        running.projectiles.append(still_shot(300, 300))
        park_enemy(running)
        running.particles.append(
            Particle(x=0, y=0, vx=0, vy=0, decay=0.1, size=2, color=(1, 2, 3))
        )
        running.draw(surface)

        assert surface.calls[0] == ("overlay", ((13, 13, 21), 0.2))
        assert surface.calls[1][0] == "save"
        assert surface.calls[2] == ("translate", (0.0, 0.0))
        assert surface.calls[-1][0] == "restore"

        colours = [args[-1] for op, args in surface.calls if op in ("fill_rect", "fill_circle")]
        player_i = colours.index(running.player.color)
        shot_i = colours.index((255, 255, 0))
        enemy_i = colours.index(running.enemies[0].color)
        particle_i = colours.index((1, 2, 3))
        assert player_i < shot_i < enemy_i < particle_i

    def test_shake_offset_applied(self, running, surface):
        running.shake.trigger(10, 200)
        running.update(16)
        running.draw(surface)
        assert surface.calls[2] == ("translate", (running.shake.x, running.shake.y))
