import pytest

from floorplan_kernel import Bounds, ContractError, SelectableElement, SelectionManager, SelectionOptions


@pytest.fixture
def elements():
    return [
        SelectableElement('e1', 'wall', Bounds(0, 0, 10, 10), category='a', layer_id='L1'),
        SelectableElement('e2', 'door', Bounds(20, 0, 10, 10), category='a', layer_id='L2'),
        SelectableElement('e3', 'wall', Bounds(45, 45, 10, 10), category='b', layer_id='L1'),
    ]


def test_single_selection_replace_add_remove():
    manager = SelectionManager()

    manager.select_single('e1')
    manager.select_single('e2')
    assert manager.get_selection() == ['e2']

    manager.select_single('e1', additive=True)
    assert manager.get_selection() == ['e2', 'e1']

    manager.select_single('e2', subtractive=True)
    assert manager.get_selection() == ['e1']
    assert manager.is_selected('e1')
    assert manager.selection_count() == 1


def test_box_contain_excludes_straddling_element(elements):
    manager = SelectionManager()

    assert manager.select_box((0, 0), (25, 20), elements, compare_mode='contain') == ['e1']
    assert manager.select_box((25, 20), (0, 0), elements, compare_mode='intersect') == ['e1', 'e2']
    assert manager.get_selection() == ['e1', 'e2']


def test_box_touching_edge_counts_as_intersect(elements):
    manager = SelectionManager()
    assert manager.select_box((30, 0), (40, 5), elements) == ['e2']


def test_box_additive_keeps_previous(elements):
    manager = SelectionManager()
    manager.select_single('e3')

    manager.select_box((0, 0), (5, 5), elements, additive=True)
    assert manager.get_selection() == ['e3', 'e1']

    manager.select_box((0, 0), (5, 5), elements)
    assert manager.get_selection() == ['e1']


def test_lasso_uses_box_centers(elements):
    manager = SelectionManager()
    path = [(-5, -5), (35, -5), (35, 15), (-5, 15)]

    assert manager.select_lasso(path, elements) == ['e1', 'e2']
    # a lasso through e3's box that misses its center
    assert manager.select_lasso([(40, 40), (49, 40), (49, 49), (40, 49)], elements) == []
    assert manager.get_selection() == []


@pytest.mark.parametrize(
    'criteria, expected',
    [('type', ['e1', 'e3']), ('category', ['e1', 'e2']), ('layer', ['e1', 'e3'])],
)
def test_magic_wand(elements, criteria, expected):
    manager = SelectionManager()
    assert manager.select_similar(elements[0], elements, criteria=criteria) == expected
    assert manager.get_selection() == expected


def test_magic_wand_rejects_unknown_criteria(elements):
    with pytest.raises(ContractError):
        SelectionManager().select_similar(elements[0], elements, criteria='colour')


def test_paint_keeps_adding(elements):
    manager = SelectionManager()
    manager.select_single('e3')

    assert manager.select_paint([(5, 5)], elements, brush_size=3) == ['e1']
    assert manager.select_paint([(5, 5), (25, 6)], elements, brush_size=3) == ['e2']
    assert manager.get_selection() == ['e3', 'e1', 'e2']


def test_paint_can_replace_when_not_additive(elements):
    manager = SelectionManager()
    manager.select_single('e3')

    assert manager.select_paint([(25, 6)], elements, brush_size=3, additive=False) == ['e2']
    assert manager.get_selection() == ['e2']


def test_replacing_paint_reports_only_new_ids(elements):
    manager = SelectionManager()
    manager.select_single('e2')
    manager.select_single('e3', additive=True)

    assert manager.select_paint([(5, 5), (25, 6)], elements, brush_size=3, additive=False) == ['e1']
    assert manager.get_selection() == ['e1', 'e2']


def test_paint_uses_configured_brush(elements):
    manager = SelectionManager(SelectionOptions(brush_size=1))
    assert manager.select_paint([(7, 7)], elements) == []
    manager.update_options(brush_size=5)
    assert manager.select_paint([(7, 7)], elements) == ['e1']


def test_select_all_deselect_and_invert(elements):
    manager = SelectionManager()
    manager.select_all(elements)
    assert manager.get_selection() == ['e1', 'e2', 'e3']

    manager.deselect_all()
    assert manager.get_selection() == []

    manager.select_single('e1')
    manager.invert_selection(elements)
    assert manager.get_selection() == ['e2', 'e3']


def test_selection_bounds(elements):
    manager = SelectionManager()
    assert manager.get_selection_bounds(elements) is None

    manager.select_single('e1')
    manager.select_single('e3', additive=True)
    assert manager.get_selection_bounds(elements) == Bounds(0, 0, 55, 55)


def test_select_dispatches_on_mode(elements):
    manager = SelectionManager(SelectionOptions(mode='lasso'))

    hits = manager.select(path=[(-5, -5), (15, -5), (15, 15), (-5, 15)], elements=elements)
    assert hits == ['e1']

    hits = manager.select('box', start=(0, 0), end=(25, 20), elements=elements, compare_mode='contain')
    assert hits == ['e1']

    manager.select('single', element_id='e3', additive=True)
    assert manager.get_selection() == ['e1', 'e3']

    assert manager.select('paint', path=[(25, 5)], elements=elements, brush_size=2) == ['e2']
    assert manager.select('magic_wand', reference=elements[1], elements=elements) == ['e2']


@pytest.mark.parametrize(
    'mode, params',
    [
        ('lasso-ish', {}),
        ('box', {'start': (0, 0), 'elements': []}),
        ('single', {'element_id': 'e1', 'colour': 'red'}),
        ('box', {'start': (0, 0), 'end': (1, 1), 'elements': [], 'compare_mode': 'touch'}),
    ],
)
def test_select_contract_violations(mode, params):
    with pytest.raises(ContractError):
        SelectionManager().select(mode, **params)


def test_options_are_validated():
    with pytest.raises(ContractError):
        SelectionOptions(mode='freehand')
    with pytest.raises(ContractError):
        SelectionOptions(brush_size=-1)

    manager = SelectionManager()
    manager.update_options(mode='paint', additive=True)
    assert manager.options.mode == 'paint'
    with pytest.raises(ContractError):
        manager.update_options(mode='freehand')
    with pytest.raises(ContractError):
        manager.update_options(radius=3)
    assert manager.options.mode == 'paint'
