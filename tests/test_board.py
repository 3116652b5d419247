import pytest

from tetris_board import Image, InvariantError, Point, sweep


def image_from(*lines):
    img = Image(len(lines[0]), len(lines))
    for y, line in enumerate(lines):
        for x, ch in enumerate(line):
            if ch != ".":
                img.set(x, y, ch)
    return img


def picture(img):
    return ["".join(c or "." for c in row) for row in img.rows]


def test_get_set_bounds_checked():
    img = Image(3, 2)
    img.set(2, 1, "I")
    assert img.get(2, 1) == "I"
    assert img.get(0, 0) is None
    for x, y in [(3, 0), (-1, 0), (0, 2), (0, -1)]:
        with pytest.raises(IndexError):
            img.get(x, y)
        with pytest.raises(IndexError):
            img.set(x, y, "T")


def test_can_place_rejects_overlap_and_out_of_bounds():
    board = image_from("....",
                       ".Z..",
                       "....",
                       "....")
    piece = image_from("I.",
                       "..")
    assert board.can_place(piece, Point(0, 0))
    assert not board.can_place(piece, Point(1, 1))
    assert not board.can_place(piece, Point(4, 0))
    assert not board.can_place(piece, Point(-1, 0))
    assert not board.can_place(piece, Point(0, 4))
    # empty source cells may hang off the edge
    assert board.can_place(piece, Point(3, 3))


def test_can_place_does_not_mutate():
    board = image_from("..", "..")
    before = picture(board)
    board.can_place(image_from("TT", "TT"), Point(0, 0))
    assert picture(board) == before


def test_place_drops_cells_outside():
    board = Image(3, 3)
    board.place(image_from("SS", "SS"), Point(-1, -1))
    assert picture(board) == ["S..", "...", "..."]
    board.place(image_from("LL", "LL"), Point(2, 2))
    assert picture(board) == ["S..", "...", "..L"]


def test_place_with_x_scale_and_crop_top():
    board = Image(4, 2)
    board.place(image_from("I", "J"), Point(0, 0), x_scale=2)
    assert picture(board) == ["II..", "JJ.."]
    board = Image(2, 2)
    board.place(image_from("I", "J"), Point(1, 0), crop_top=1)
    assert picture(board) == [".J", ".."]
    assert not Image(1, 1).can_place(image_from("T"), Point(0, 0), x_scale=2)


def test_rotate_clockwise_inside_window():
    img = image_from(".T..",
                     "TTT.",
                     "....",
                     "...Z")
    img.rotate_clockwise(3)
    assert picture(img) == [".T..",
                            ".TT.",
                            ".T..",
                            "...Z"]


def test_rotate_clockwise_zero_window_is_noop():
    img = image_from(".OO.", ".OO.")
    img.rotate_clockwise(0)
    assert picture(img) == [".OO.", ".OO."]


def test_rotate_window_too_large():
    with pytest.raises(InvariantError):
        Image(2, 2).rotate_clockwise(3)


def test_occupied_counts_off_board():
    board = image_from(".Z", "..")
    assert board.occupied(Point(1, 0))
    assert not board.occupied(Point(0, 0))
    assert board.occupied(Point(-1, 0))
    assert board.occupied(Point(0, 2))
    assert board.occupied(Point(2, 1))


def test_recolored_copy():
    img = image_from("T.", "TT")
    ghost = img.recolored("G")
    assert picture(ghost) == ["G.", "GG"]
    assert picture(img) == ["T.", "TT"]


def test_sweep_compacts_kept_rows():
    board = image_from("...",
                       "Z..",
                       "III",
                       "J.J")
    assert sweep(board) == 1
    assert picture(board) == ["...",
                              "...",
                              "Z..",
                              "J.J"]


def test_sweep_several_rows_keeps_order():
    board = image_from("S..",
                       "OOO",
                       ".T.",
                       "LLL",
                       "IIZ")
    assert sweep(board) == 3
    assert picture(board) == ["...", "...", "...", "S..", ".T."]


def test_sweep_nothing_full():
    board = image_from("...", "Z.Z")
    assert sweep(board) == 0
    assert picture(board) == ["...", "Z.Z"]
