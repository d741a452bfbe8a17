"""Editable, paginated nicegrid demo backed by a pandas DataFrame.

Committed edits are written back to the DataFrame and the grid is re-supplied
with the new data; ``row_id_column`` keeps row keys (and selection) stable
across those reloads.
"""

import pandas as pd
from nicegui import ui

from nicegrid import ColumnConfig, GridConfig, GridEngine, GridView, configure_logging
from nicegrid.grid.events import CellEdited, FilterChanged, RowSelectionChanged

configure_logging(level="DEBUG")

df = pd.DataFrame(
    {
        "id": [str(i) for i in range(1, 76)],
        "name": [f"Sample {i}" for i in range(1, 76)],
        "city": (["Sacramento", "Baltimore", "Montreal"] * 25),
        "score": [round(50 + (i * 7) % 50, 1) for i in range(75)],
    }
)

columns = [
    ColumnConfig("id", sortable=True),
    ColumnConfig("name", filterable=True, editable=True),
    ColumnConfig("city", filterable=True, editable=True),
    ColumnConfig("score"),
]

grid_cfg = GridConfig(
    page_length=20,
    paginate=True,
    title_column=1,
    row_id_column=0,
    description="Samples (Enter to edit, Space to select)",
)

engine = GridEngine(grid_cfg, columns, df)


def on_edit(event: CellEdited) -> None:
    print("EDIT:", event.row_key, columns[event.column].name, "->", event.value)
    df.loc[df["id"] == event.row_key, columns[event.column].name] = event.value
    # reload after the commit has finished rendering
    ui.timer(0.01, lambda: view.render(engine.set_data(columns, df).snapshot), once=True)


def on_select(event: RowSelectionChanged) -> None:
    print("SELECT:", event.keys, event.selected, event.state, event.count)


def on_filter(event: FilterChanged) -> None:
    print("FILTER:", event.filters)


engine.on_cell_edited(on_edit)
engine.on_row_selection_changed(on_select)
engine.on_filter_changed(on_filter)

with ui.header().classes("py-2 px-4"):
    ui.label("nicegrid demo")

view = GridView(engine)

ui.run()
