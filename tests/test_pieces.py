import numpy as np
import pytest

from falling_blocks.game import BASE_SHAPES, MASK_SIZE, Piece, TetrominoType


ALL_KINDS = list(TetrominoType)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_four_clockwise_rotations_return_original(kind):
    piece = Piece.spawn(kind)
    rotated = piece
    for _ in range(4):
        rotated = rotated.rotated_cw()
    assert np.array_equal(rotated.mask, piece.mask)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_counterclockwise_undoes_clockwise(kind):
    piece = Piece.spawn(kind)
    assert piece.rotated_cw().rotated_ccw().same_shape(piece)
    assert piece.rotated_ccw().rotated_cw().same_shape(piece)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_rotation_cell_mapping(kind):
    piece = Piece.spawn(kind)
    cw = piece.rotated_cw().mask
    ccw = piece.rotated_ccw().mask
    for i in range(MASK_SIZE):
        for j in range(MASK_SIZE):
            assert cw[i, j] == piece.mask[3 - j, i]
            assert ccw[i, j] == piece.mask[j, 3 - i]


def test_i_piece_rotates_into_last_column():
    vertical = Piece.spawn(TetrominoType.I).rotated_cw()
    assert vertical.mask[:, 3].tolist() == [1, 1, 1, 1]
    assert int(vertical.mask.sum()) == 4


def test_rotation_keeps_color_and_leaves_original_untouched():
    piece = Piece.spawn(TetrominoType.T)
    before = piece.mask.copy()
    rotated = piece.rotated_cw()
    assert rotated is not piece
    assert rotated.color == piece.color == int(TetrominoType.T)
    assert np.array_equal(piece.mask, before)


def test_mask_is_read_only():
    piece = Piece.spawn(TetrominoType.S)
    with pytest.raises(ValueError):
        piece.mask[0, 0] = 1


def test_mask_must_be_four_by_four():
    with pytest.raises(ValueError):
        Piece(TetrominoType.O, np.ones((2, 2), dtype=np.int8))


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_canonical_shapes_have_four_cells_in_top_rows(kind):
    mask = BASE_SHAPES[kind]
    assert int(mask.sum()) == 4
    assert not mask[2:].any()


def test_cells_at_offsets_by_anchor():
    piece = Piece.spawn(TetrominoType.O)
    assert sorted(piece.cells_at(3, -1)) == [(3, -1), (3, 0), (4, -1), (4, 0)]
