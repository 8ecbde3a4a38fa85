import pygame

from falling_blocks.visualization.human_play import MAX_NAME_LENGTH, _is_reset


def _key(key, mod=0):
    return pygame.event.Event(pygame.KEYDOWN, key=key, mod=mod, unicode="")


def test_reset_key_works_while_playing_and_after_entry():
    assert _is_reset(_key(pygame.K_r), entering_name=False)
    assert not _is_reset(_key(pygame.K_LEFT), entering_name=False)


def test_reset_while_typing_needs_ctrl():
    assert not _is_reset(_key(pygame.K_r), entering_name=True)
    assert _is_reset(_key(pygame.K_r, pygame.KMOD_LCTRL), entering_name=True)


def test_name_length_limit():
    assert MAX_NAME_LENGTH == 20
