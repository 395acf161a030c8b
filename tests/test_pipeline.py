from ledger_normalizer import AuditRecorder, SkipReason, SourceResult, run_pipeline


def _results() -> list[SourceResult]:
    return [
        SourceResult.model_validate(
            {
                "accountName": "Max",
                "success": True,
                "transactions": [
                    {
                        "description": "Groceries",
                        "status": "completed",
                        "chargedAmount": -100,
                        "processedDate": "2024-03-10",
                        "accountName": "Max",
                    },
                    {
                        "description": "Coffee",
                        "status": "pending",
                        "chargedAmount": -20,
                        "processedDate": "2024-03-12",
                        "accountName": "Max",
                    },
                    {
                        "description": "Voided",
                        "status": "completed",
                        "chargedAmount": 0,
                        "processedDate": "2024-03-11",
                        "accountName": "Max",
                    },
                    {
                        "description": "Refund",
                        "status": "completed",
                        "chargedAmount": 50,
                        "processedDate": "2024-03-14",
                        "accountName": "Max",
                    },
                ],
            }
        ),
        SourceResult.model_validate(
            {"accountName": "Leumi", "success": False, "error": "Login failed"}
        ),
    ]


def test_run_pipeline_end_to_end():
    result = run_pipeline(_results(), detailed_logging=True, sample_limit=1)

    assert [t.description for t in result.kept] == ["Groceries", "Refund"]
    assert [(s.transaction.description, s.reason) for s in result.skipped] == [
        ("Coffee", SkipReason.PENDING),
        ("Voided", SkipReason.ZERO_AMOUNT),
    ]
    assert [r.date for r in result.rows] == ["2024-03-14", "2024-03-10"]
    assert result.summary.total_outflow == 100
    assert result.summary.total_inflow == 50

    log = result.audit.log
    assert [s.reason for s in log.skipped] == [SkipReason.PENDING, SkipReason.ZERO_AMOUNT]
    assert [a.name for a in log.accounts] == ["Max"]
    # Source totals include what was later skipped; the summary does not.
    assert log.accounts[0].total_outflow == 120
    assert log.accounts[0].transaction_count == 4
    assert len(log.transform_sample) == 1
    assert log.transform_pairs_seen == 2
    assert log.output_file is None
    assert "Output: (none - dry run or no transactions)" in result.audit.render()


def test_run_pipeline_without_detailed_logging_records_no_sample():
    result = run_pipeline(_results())
    assert result.audit.log.transform_sample is None
    assert "Transformation Details:" not in result.audit.render()


def test_run_pipeline_uses_given_recorder():
    recorder = AuditRecorder()
    result = run_pipeline(_results(), recorder=recorder)
    assert result.audit is recorder

    recorder.record_output(result.rows, "out.json", "payload")
    assert recorder.log.total_outflow == 100
    assert recorder.log.total_inflow == 50


def test_run_pipeline_ignores_transactions_of_failed_sources():
    failed = SourceResult.model_validate(
        {
            "accountName": "Broken",
            "success": False,
            "transactions": [{"description": "x", "chargedAmount": -1, "processedDate": "2024-03-01"}],
        }
    )
    result = run_pipeline([failed])
    assert result.kept == []
    assert result.rows == []
    assert result.audit.log.accounts == []


def test_run_pipeline_empty():
    result = run_pipeline([])
    assert result.rows == []
    assert result.summary.by_account == {}
    assert "Accounts:\n  (none)" in result.audit.render()


def test_run_pipeline_keeps_going_when_an_installment_date_cannot_shift():
    result = SourceResult.model_validate(
        {
            "accountName": "Max",
            "success": True,
            "transactions": [
                {
                    "description": "Sofa payment 2 of 3",
                    "status": "completed",
                    "chargedAmount": -300,
                    "processedDate": "9999-12-31",
                    "accountName": "Max",
                },
                {
                    "description": "Groceries",
                    "status": "completed",
                    "chargedAmount": -100,
                    "processedDate": "2024-03-10",
                    "accountName": "Max",
                },
            ],
        }
    )

    outcome = run_pipeline([result])

    assert [(r.date, r.payee) for r in outcome.rows] == [("2024-03-10", "Groceries")]
    assert len(outcome.kept) == 2
