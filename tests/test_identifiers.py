from ai_readiness.core.identifiers import new_event_id, new_scan_run_id, quest_id_for_key, repo_id_for, team_id_for_owner


def test_identifier_formats():
    assert quest_id_for_key("formatters.javascript.prettier_present") == "quest_formatters_javascript_prettier_present"
    assert team_id_for_owner("Acme") == "team_acme"
    assert repo_id_for("Acme", "Shop-API") == "repo_acme_shop-api"
    assert new_event_id().startswith("ev_")

    prefix, run_id, millis = new_scan_run_id("4242").split("_")
    assert prefix == "scanrun"
    assert run_id == "4242"
    assert millis.isdigit()
