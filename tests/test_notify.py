from __future__ import annotations

from cvjob.errors import AppError, ErrorKind, ErrorPhase, validation_error
from cvjob.notify import Toast, ToastReporter, error_toast


def test_message_reaches_sinks():
    seen = []
    reporter = ToastReporter(sinks=[seen.append])

    toast = reporter.message("letterGenerated")

    assert seen == [toast]
    assert toast.title == "Ansøgning genereret"
    assert toast.variant == "success"


def test_failing_sink_does_not_block_others():
    seen = []

    def broken(toast: Toast) -> None:
        raise RuntimeError("sink down")

    reporter = ToastReporter(sinks=[broken])
    reporter.add_sink(seen.append)
    reporter.message("draftSaved")

    assert len(seen) == 1


def test_validation_toast_lists_fields():
    toast = error_toast(validation_error({
        "title": "Jobtitel er påkrævet",
        "company": "Virksomhedsnavn er påkrævet",
    }))

    assert toast.title == "Manglende felter"
    assert toast.description == "Jobtitel er påkrævet Virksomhedsnavn er påkrævet"
    assert toast.action_label is None


def test_phase_help():
    toast = error_toast(AppError("boom", ErrorKind.SERVER, phase=ErrorPhase.LETTER_SAVE))

    assert toast.title == "Fejl ved gemning"
    assert toast.action_label == "Gem ansøgning"
    assert toast.variant == "destructive"


def test_timeout_during_generation():
    toast = error_toast(AppError("slow", ErrorKind.TIMEOUT, phase=ErrorPhase.GENERATION))

    assert toast.title == "Generering tog for lang tid"
    assert "Dit job er gemt" in toast.description
    assert toast.action_label == "Generer igen"


def test_auth_overrides_phase():
    toast = error_toast(AppError("401", ErrorKind.AUTH, phase=ErrorPhase.GENERATION))

    assert toast.title == "Godkendelsesfejl"
    assert toast.action_label == "Log ind"


def test_kind_fallbacks_without_phase():
    assert error_toast(AppError("x", ErrorKind.NETWORK)).title == "Netværksfejl"
    assert error_toast(AppError("x", ErrorKind.TIMEOUT)).title == "Generering tog for lang tid"
    server = error_toast(AppError("Noget gik galt", ErrorKind.SERVER))
    assert server.title == "Ukendt fejl"
    assert server.description == "Noget gik galt"
    assert server.action_label == "Prøv igen"
