"""Accuracy arithmetic and encouragement lines shared by sessions and sentences."""

from __future__ import annotations


def accuracy_percent(correct: int, attempted: int) -> int:
    """Whole-number accuracy, rounding halves up. Zero attempts score 0."""
    if attempted <= 0:
        return 0
    return (200 * correct + attempted) // (2 * attempted)


def meets_percent(correct: int, attempted: int, threshold: int) -> bool:
    """Exact check of ``correct / attempted >= threshold%`` without floats."""
    if attempted <= 0:
        return False
    return correct * 100 >= threshold * attempted


def pick_encouragement(accuracy: int, full_set_completed: bool = False) -> str:
    if full_set_completed and accuracy >= 90:
        return "You read every single one! You're a reading superstar! 🌟"
    if accuracy >= 90:
        return "Wow, almost every word was right! 📚"
    if accuracy >= 70:
        return "Great reading! Your words are really growing! 🌱"
    if accuracy >= 50:
        return "Good effort! You're getting better every time! 💪"
    if accuracy > 0:
        return "Nice try! Every word you practise helps you grow! 🎉"
    return "Let's try reading together! 📖"
