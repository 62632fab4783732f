from sshash.node import INVALID_UINT32, Node


def test_default_links_are_invalid():
    node = Node(1, 2, 3)
    assert node.chain_id == node.left == node.right == INVALID_UINT32 == 0xFFFFFFFF
    assert node.sign is True
    blank = Node()
    assert (blank.id, blank.front, blank.back) == (INVALID_UINT32,) * 3


def test_flip_swaps_and_negates():
    node = Node(7, 4, 9)
    node.flip()
    assert (node.front, node.back, node.sign) == (9, 4, False)


def test_double_flip_restores():
    node = Node(7, 4, 9, False)
    node.flip()
    node.flip()
    assert node == Node(7, 4, 9, False)


def test_str_format():
    node = Node(3, 1, 2)
    assert str(node) == "3:[1,2,+]"
    node.flip()
    assert str(node) == "3:[2,1,-]"