"""Pytest fixtures for graph tests."""

import pytest


@pytest.fixture
async def family(graph):
    """
    Three generations:

        Ramesh = Padma
           |        \\
         Suresh = Anita   Mahesh
           |
        Kiran, Meera
    """
    people = {}
    for name, born in [
        ("Ramesh", "1930-05-01"),
        ("Padma", "1934-08-12"),
        ("Suresh", "1958-02-20"),
        ("Mahesh", "1961-11-03"),
        ("Anita", "1960-07-07"),
        ("Kiran", "1985-01-15"),
        ("Meera", "1988-09-30"),
    ]:
        people[name] = await graph.add_member(name, date_of_birth=born)

    await graph.add_spouse(people["Ramesh"].id, people["Padma"].id, marriage_date="1955-06-01")
    await graph.add_parent_child(people["Ramesh"].id, people["Suresh"].id)
    await graph.add_parent_child(people["Ramesh"].id, people["Mahesh"].id)
    await graph.add_spouse(people["Suresh"].id, people["Anita"].id)
    await graph.add_parent_child(people["Suresh"].id, people["Kiran"].id)
    await graph.add_parent_child(people["Anita"].id, people["Meera"].id)
    return people
