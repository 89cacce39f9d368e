import math
import pathlib
import sys
import unittest

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

from flute_core import (
    AcousticContext,
    InvalidGeometry,
    ToneHoleSpec,
    build_context,
    convert_context_units,
    convert_holes_units,
    convert_length,
    fahrenheit_to_celsius,
    speed_of_sound,
    speed_of_sound_mps,
    temperature_to_celsius,
)


class SpeedOfSoundTest(unittest.TestCase):
    def test_room_temperature(self) -> None:
        self.assertAlmostEqual(speed_of_sound_mps(20.0), 343.2, delta=0.1)
        self.assertAlmostEqual(speed_of_sound(20.0, "inches"), 13512.9, delta=1.0)
        self.assertAlmostEqual(speed_of_sound(20.0, "cm"), speed_of_sound_mps(20.0) * 100.0, places=9)

    def test_freezing_point(self) -> None:
        self.assertAlmostEqual(speed_of_sound_mps(0.0), 331.3, places=9)

    def test_warmer_air_is_faster(self) -> None:
        self.assertGreater(speed_of_sound_mps(30.0), speed_of_sound_mps(10.0))

    def test_absolute_zero_boundary(self) -> None:
        self.assertEqual(speed_of_sound_mps(-273.15), 0.0)
        with self.assertRaises(InvalidGeometry) as ctx:
            speed_of_sound_mps(-300.0)
        self.assertEqual(ctx.exception.stage, "speed_of_sound")

    def test_non_finite_temperature(self) -> None:
        for temperature in (math.nan, math.inf, -math.inf):
            with self.subTest(temperature=temperature):
                with self.assertRaises(InvalidGeometry) as ctx:
                    speed_of_sound_mps(temperature)
                self.assertEqual(ctx.exception.stage, "speed_of_sound")
                with self.assertRaises(InvalidGeometry):
                    speed_of_sound(temperature, "cm")

    def test_unknown_unit(self) -> None:
        with self.assertRaises(ValueError):
            speed_of_sound(20.0, "furlongs")  # type: ignore[arg-type]


class TemperatureConversionTest(unittest.TestCase):
    def test_fahrenheit(self) -> None:
        self.assertAlmostEqual(fahrenheit_to_celsius(68.0), 20.0, places=9)
        self.assertAlmostEqual(temperature_to_celsius(32.0, "F"), 0.0, places=9)
        self.assertEqual(temperature_to_celsius(21.5, "C"), 21.5)

    def test_unknown_scale(self) -> None:
        with self.assertRaises(ValueError):
            temperature_to_celsius(300.0, "K")  # type: ignore[arg-type]


class UnitConversionTest(unittest.TestCase):
    def test_convert_length(self) -> None:
        self.assertAlmostEqual(convert_length(2.54, "cm", "inches"), 1.0, places=5)
        self.assertAlmostEqual(convert_length(1.0, "inches", "cm"), 2.54, places=5)
        self.assertEqual(convert_length(0.824, "inches", "inches"), 0.824)

    def test_convert_context_and_holes(self) -> None:
        context = AcousticContext(
            speed_of_sound=13512.9,
            bore_diameter=0.824,
            wall_thickness=0.113,
            embouchure_diameter=0.5,
            end_frequency=293.66,
        )
        converted = convert_context_units(context, "inches", "cm")
        self.assertAlmostEqual(converted.bore_diameter, 0.824 * 2.54, places=4)
        self.assertAlmostEqual(converted.speed_of_sound, 13512.9 * 2.54, delta=0.1)
        self.assertEqual(converted.end_frequency, 293.66)

        holes = convert_holes_units([ToneHoleSpec(frequency=440.0, diameter=1.0)], "inches", "cm")
        self.assertAlmostEqual(holes[0].diameter, 2.54, places=5)
        self.assertEqual(holes[0].frequency, 440.0)

    def test_build_context(self) -> None:
        context = build_context(
            temperature_c=20.0,
            units="cm",
            bore_diameter=1.9,
            wall_thickness=0.4,
            embouchure_diameter=1.0,
            end_frequency=261.63,
        )
        self.assertAlmostEqual(context.speed_of_sound, 34321.4, delta=1.0)
        context.validate()


if __name__ == "__main__":
    unittest.main()
