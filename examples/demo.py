#!/usr/bin/env python3
"""
Demo script showing how to use the voice biomarker pipeline programmatically.

Runs on synthetic signals, so no audio files or models are needed.
"""

import numpy as np
from rich.console import Console
from rich.table import Table

from voice_biomarkers import VoiceBiomarkerPipeline, load_config
from voice_biomarkers.utils import setup_logging


console = Console()


def synthetic_voice(sample_rate: int = 16000, duration: float = 2.0) -> np.ndarray:
    """A gliding tone with amplitude modulation and short gaps."""
    t = np.arange(int(sample_rate * duration)) / sample_rate
    f0 = 180 + 40 * np.sin(2 * np.pi * 0.5 * t)
    phase = 2 * np.pi * np.cumsum(f0) / sample_rate
    envelope = 0.4 * (0.6 + 0.4 * np.sin(2 * np.pi * 3 * t))
    audio = envelope * np.sin(phase)
    # two pauses
    audio[int(0.6 * sample_rate):int(0.8 * sample_rate)] = 0
    audio[int(1.3 * sample_rate):int(1.5 * sample_rate)] = 0
    return audio


def print_result(title: str, result):
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    acoustic = result.acoustic_features
    voice = result.voice_emotion
    table.add_row("Mean F0 (Hz)", f"{acoustic.pitch.mean_f0:.1f}")
    table.add_row("Voiced ratio", f"{acoustic.pitch.voiced_ratio:.2f}")
    table.add_row("Jitter / Shimmer (%)", f"{acoustic.voice_quality.jitter_local:.2f} / {acoustic.voice_quality.shimmer_local:.2f}")
    table.add_row("HNR (dB)", f"{acoustic.voice_quality.hnr:.1f}")
    table.add_row("Pauses", str(acoustic.temporal.pause_count))
    table.add_row("Pitch pattern", result.prosody_features.pitch_pattern)
    table.add_row("Voice emotion", voice.primary_emotion)
    table.add_row("Voice VAD", f"{voice.vad.valence:+.2f} / {voice.vad.arousal:+.2f} / {voice.vad.dominance:.2f}")
    table.add_row("Depression / Anxiety / Stress", (
        f"{voice.depression_indicators.score:.2f} / "
        f"{voice.anxiety_indicators.score:.2f} / "
        f"{voice.stress_indicators.score:.2f}"
    ))

    if result.fusion is not None:
        fusion = result.fusion
        table.add_row("Fused emotion", fusion.primary_emotion)
        table.add_row("Agreement", f"{fusion.modality_agreement:.2f}")
        table.add_row("Discrepancy", fusion.discrepancy.type)

    table.add_row("Overall confidence", f"{result.quality.overall_confidence:.2f}")
    console.print(table)

    if result.fusion is not None:
        for rec in result.fusion.recommendations:
            console.print(f"  [yellow]*[/yellow] {rec}")


def main():
    setup_logging("INFO")
    config = load_config(language="en")
    pipeline = VoiceBiomarkerPipeline(config)
    audio = synthetic_voice(config.sample_rate)

    voice_only = pipeline.process_audio(audio, config.sample_rate)
    print_result("Voice only", voice_only)

    fused = pipeline.process_audio(
        audio,
        config.sample_rate,
        transcript="Everything is great, I am really happy with how things went",
    )
    print_result("Voice + transcript", fused)

    console.print(f"\n[bold]Observation vector:[/bold] {np.round(pipeline.to_state_observation(fused), 3).tolist()}")

    console.print("\n[bold]Streaming[/bold]")
    chunk = config.sample_rate // 10
    for i in range(0, len(audio) - chunk + 1, chunk):
        estimate = pipeline.add_realtime_chunk(audio[i:i + chunk])
        if estimate is not None:
            console.print(f"  chunk {i // chunk + 1:2d}: {estimate.primary_emotion} (valence {estimate.vad.valence:+.2f})")


if __name__ == "__main__":
    main()
